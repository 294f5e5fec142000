from __future__ import annotations

from pathlib import Path
from typing import Any

import msgspec
import typer

from .debug_log import close_parse_debug_log, init_parse_debug_log
from .errors import SaveParseError
from .parse import ParseResult, parse


app = typer.Typer(add_completion=False)


def _load(save_file: Path, *, debug_log: Path | None = None, **options: Any) -> ParseResult:
    if debug_log is not None:
        init_parse_debug_log(debug_log)
    try:
        data = save_file.read_bytes()
    except OSError as exc:
        typer.echo(f"cannot read {save_file}: {exc}", err=True)
        raise typer.Exit(code=1) from exc
    try:
        return parse(data, **options)
    except SaveParseError as exc:
        typer.echo(f"{save_file}: {exc}", err=True)
        raise typer.Exit(code=1) from exc
    finally:
        if debug_log is not None:
            close_parse_debug_log()


def _encode_default(obj: Any) -> Any:
    if isinstance(obj, bytes):
        return obj.hex()
    raise NotImplementedError(f"cannot encode {type(obj).__name__}")


@app.command("dump")
def cmd_dump(
    save_file: Path = typer.Argument(..., help="save file path (.Civ6Save)"),
    simple: bool = typer.Option(False, "--simple", help="print plain values instead of typed nodes"),
    debug_log: Path | None = typer.Option(
        None,
        "--debug-log",
        envvar="CIV6SAVE_DEBUG_LOG",
        help="append decode diagnostics to this file",
    ),
) -> None:
    """Print the decoded save as JSON."""
    result = _load(save_file, debug_log=debug_log, simple=simple)
    tree = result.simple if simple else result.parsed
    raw = msgspec.json.encode(tree, enc_hook=_encode_default)
    typer.echo(msgspec.json.format(raw, indent=2).decode("utf-8"))


@app.command("summary")
def cmd_summary(save_file: Path = typer.Argument(..., help="save file path (.Civ6Save)")) -> None:
    """Print the game settings and one line per civ."""
    tree = _load(save_file, simple=True).simple
    assert tree is not None
    typer.echo(
        f"turn={tree.get('GAME_TURN')} speed={tree.get('GAME_SPEED')} "
        f"map_size={tree.get('MAP_SIZE')} map_file={tree.get('MAP_FILE')}"
    )
    for idx, civ in enumerate(tree["CIVS"]):
        marker = "*" if civ.get("IS_CURRENT_TURN") else " "
        alive = "alive" if civ.get("PLAYER_ALIVE") else "dead"
        typer.echo(
            f"{marker}{idx:02d}  {str(civ.get('PLAYER_NAME') or ''):20s}  "
            f"{str(civ.get('ACTOR_NAME') or ''):28s}  {str(civ.get('LEADER_NAME') or ''):32s}  {alive}"
        )
    typer.echo(f"actors={len(tree['ACTORS'])} mods={len(tree['MODS'])}")


@app.command("extract-compressed")
def cmd_extract_compressed(
    save_file: Path = typer.Argument(..., help="save file path (.Civ6Save)"),
    out_file: Path = typer.Argument(..., help="destination for the inflated payload"),
) -> None:
    """Write the inflated embedded payload (empty when the save has none)."""
    result = _load(save_file, output_compressed=True)
    payload = result.compressed or b""
    out_file.parent.mkdir(parents=True, exist_ok=True)
    out_file.write_bytes(payload)
    typer.echo(f"wrote {len(payload)} bytes to {out_file}")


def main() -> None:
    app()


if __name__ == "__main__":  # pragma: no cover
    main()
