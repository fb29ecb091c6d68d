"""CLI implementation for fileaddr."""

import json
import sys
from contextlib import ExitStack
from pathlib import Path
from typing import Any, Dict, List, Optional

import typer

from .core.model import KNOWN_FILE_TYPES, FileType
from .core.options import SourceOption, TargetOption
from .core.util import error_asdict
from .io import HttpTransport, open_local_reader, open_local_writer
from .parser import Parser

app = typer.Typer(add_completion=False, help="Copy files between URIs, accepting only whitelisted file signatures.")


def resolve_types(types: Optional[List[str]]) -> List[FileType]:
    """Map names from KNOWN_FILE_TYPES or raw hex signatures to FileTypes."""
    if not types:
        return list(KNOWN_FILE_TYPES.values())
    resolved = []
    for t in types:
        name = t.strip().lower()
        if name in KNOWN_FILE_TYPES:
            resolved.append(KNOWN_FILE_TYPES[name])
        else:
            try:
                bytes.fromhex(name)
            except ValueError:
                raise typer.BadParameter(f"not a known type or hex signature: {t}")
            resolved.append(FileType(name))
    return resolved


def _is_uri(value: str) -> bool:
    return value.startswith("data:") or "://" in value


# Plain local paths are opened directly rather than turned into file URIs,
# which would percent-decode "#" and "?" back into URI delimiters.
def _source_option(value: str, stack: ExitStack) -> SourceOption:
    if _is_uri(value):
        return SourceOption(uri=value)
    return SourceOption(reader=stack.enter_context(open_local_reader(Path(value).resolve())))


def _target_option(value: str, stack: ExitStack) -> TargetOption:
    if _is_uri(value):
        return TargetOption(uri=value)
    return TargetOption(writer=stack.enter_context(open_local_writer(Path(value).resolve())))


def _emit(payload: Dict[str, Any], output: Optional[Path]) -> None:
    sink = open(output, "w", encoding="utf-8") if output else sys.stdout
    try:
        json.dump(payload, sink, indent=2)
        sink.write("\n")
    finally:
        if output:
            sink.close()


TypeOption = typer.Option(None, "--type", "-t", help="Accepted type name (pdf, png, ...) or hex signature; repeatable")
VerifyOption = typer.Option(False, "--verify-tls", help="Verify TLS certificates of HTTPS endpoints")
TimeoutOption = typer.Option(None, "--timeout", min=0, help="HTTP timeout in seconds")


@app.command()
def copy(
    source: str = typer.Argument(..., help="Source URI or local path"),
    target: str = typer.Argument(..., help="Target URI or local path"),
    types: Optional[List[str]] = TypeOption,
    verify_tls: bool = VerifyOption,
    timeout: Optional[float] = TimeoutOption,
):
    """Copy SOURCE to TARGET if its leading bytes match an accepted type."""
    with Parser(*resolve_types(types), transport=HttpTransport(verify=verify_tls, timeout=timeout)) as parser:
        try:
            with ExitStack() as stack:
                file_type = parser.copy_with_option(_source_option(source, stack), _target_option(target, stack))
        except Exception as e:
            _emit(error_asdict(e), None)
            raise typer.Exit(code=1)
    _emit({"success": True, "file_type": str(file_type)}, None)


@app.command()
def sniff(
    source: str = typer.Argument(..., help="Source URI or local path"),
    types: Optional[List[str]] = TypeOption,
    encoding: Optional[str] = typer.Option(None, "--encoding", help="Also emit the content as 'hex' or 'base64'"),
    output: Optional[Path] = typer.Option(None, "-o", "--output", help="Write to PATH instead of stdout"),
    verify_tls: bool = VerifyOption,
    timeout: Optional[float] = TimeoutOption,
):
    """Read SOURCE into memory and report its matched type."""
    if encoding not in (None, "hex", "base64"):
        raise typer.BadParameter("encoding must be 'hex' or 'base64'")

    with Parser(*resolve_types(types), transport=HttpTransport(verify=verify_tls, timeout=timeout)) as parser:
        try:
            with ExitStack() as stack:
                file_type, data = parser.copy_to_bytes_with_option(_source_option(source, stack))
        except Exception as e:
            _emit(error_asdict(e), output)
            raise typer.Exit(code=1)

    payload: Dict[str, Any] = {"success": True, "file_type": str(file_type), "size": len(data)}
    if encoding == "hex":
        payload["content"] = data.hex()
    elif encoding == "base64":
        payload["content"] = data.base64()
    _emit(payload, output)


if __name__ == "__main__":
    app()
