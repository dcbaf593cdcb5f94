"""Decomposition of a cleaned signature into identity fields.

A signature like ``github.com/org/repo/pkg.(*Type).Method.func1`` is split
into:
- package path: ``github.com/org/repo/pkg``
- short package name: ``pkg``
- receiver: ``Type`` (pointer notation removed)
- function: ``Method`` (anonymous closure segments skipped)
- repository: ``github.com/org/repo``, organization ``org``, name ``pkg``

None of these functions raise. When a signature cannot be decomposed the
most general field receives the whole input.
"""

from __future__ import annotations

import re

import structlog

from stack_to_graph.core.signature import clean_function_name
from stack_to_graph.models.frame import RawFrame, StackFrame

log = structlog.get_logger()

REPOSITORY_HOSTS = ("github.com/", "bitbucket.org/")

# func1, func12 ... and the bare digit groups of func6.1 once split on '.'
ANONYMOUS_SEGMENT = re.compile(r"^(?:func\d+|\d+)$")
POINTER_RECEIVER = re.compile(r"^\(\*(.+)\)$")


def parse_package_name(signature: str) -> str:
    """Extract the package path from a fully qualified function name.

    The package runs up to the first '.' after the last '/'. Without a '/',
    it runs up to the first '.'. Without such a '.', the whole string is
    the package.

    Args:
        signature: Cleaned signature, e.g. ``net/http.(*ServeMux).ServeHTTP``

    Returns:
        Package path, e.g. ``net/http``
    """
    last_slash = signature.rfind("/")
    start = last_slash + 1 if last_slash != -1 else 0

    dot = signature.find(".", start)
    if dot == -1:
        return signature
    return signature[:dot]


def short_package_name(package: str) -> str:
    """Return the last '/'-delimited segment of a package path."""
    return package.rsplit("/", 1)[-1]


def strip_package(signature: str, package: str) -> str:
    """Remove the package prefix from a signature."""
    if signature.startswith(package + "."):
        return signature[len(package) + 1 :]
    if signature.startswith(package):
        return signature[len(package) :]
    return signature


def _is_anonymous(segment: str) -> bool:
    return not segment or ANONYMOUS_SEGMENT.match(segment) is not None


def _clean_receiver(receiver: str) -> str:
    match = POINTER_RECEIVER.match(receiver)
    if match:
        return match.group(1)
    return receiver


def parse_receiver(signature: str) -> tuple[str, str]:
    """Split a package-less signature into function name and receiver.

    Closure segments (``func1``, ``func6.1``) are skipped from the end, so
    ``run.func2`` resolves to the enclosing ``run``. If every segment is a
    closure segment the last two segments are used as they are.

    Args:
        signature: Signature with the package prefix removed,
            e.g. ``(*conn).serve``

    Returns:
        Tuple of (function, receiver); receiver is empty for free functions
    """
    segments = signature.split(".")

    for i in range(len(segments) - 1, -1, -1):
        if _is_anonymous(segments[i]):
            continue
        receiver = segments[i - 1] if i > 0 else ""
        return segments[i], _clean_receiver(receiver)

    function = segments[-1]
    receiver = segments[-2] if len(segments) > 1 else ""
    return function, _clean_receiver(receiver)


def parse_repository(package: str) -> tuple[str, str, str]:
    """Derive repository fields from a package path on a known host.

    Only ``github.com/`` and ``bitbucket.org/`` paths are recognised. For
    paths deeper than the repository root, the name is the last path
    segment rather than the repository segment.

    Args:
        package: Full package path, e.g. ``github.com/org/repo/sub``

    Returns:
        Tuple of (repository, organization, name); all empty when the
        path is not on a known host or is too short
    """
    if not package.startswith(REPOSITORY_HOSTS):
        return ("", "", "")

    parts = package.split("/")
    if len(parts) == 3:
        return (package, parts[1], parts[2])
    if len(parts) > 3:
        return ("/".join(parts[:3]), parts[1], parts[-1])
    return ("", "", "")


def parse_folder(file_path: str) -> tuple[str, str]:
    """Split a source file path into its folder and the folder's name.

    Args:
        file_path: Absolute file path, e.g. ``/src/app/main.go``

    Returns:
        Tuple of (folder, folder_name), e.g. (``/src/app``, ``app``)
    """
    parts = file_path.split("/")
    if len(parts) > 1:
        return ("/".join(parts[:-1]), parts[-2])
    return ("", "")


def normalize_frame(raw: RawFrame) -> StackFrame:
    """Turn a raw line pair into a fully decomposed StackFrame."""
    signature = clean_function_name(raw.call_description)
    package = parse_package_name(signature)

    remainder = strip_package(signature, package)
    if remainder:
        function, receiver = parse_receiver(remainder)
    else:
        function, receiver = "", ""

    if not function:
        log.debug("signature_not_decomposed", signature=signature)
        function = signature

    repository, organization, repository_name = parse_repository(package)
    folder, folder_name = parse_folder(raw.file)

    return StackFrame(
        original_signature=signature,
        function=function,
        receiver=receiver,
        package=package,
        package_name=short_package_name(package),
        repository=repository,
        repository_organization=organization,
        repository_name=repository_name,
        file=raw.file,
        folder=folder,
        folder_name=folder_name,
        line=raw.line,
    )
