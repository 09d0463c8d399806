"""Shared fixtures for the gostack2dot test-suite."""

from __future__ import annotations

from pathlib import Path

import pytest

SAMPLE_DUMP = "\n".join(
    [
        "goroutine 1 [select]:",
        "main.loop()",
        "\t/app/main.go:10 +0x1d",
        "main.main()",
        "\t/app/main.go:5 +0x25",
        "",
        "goroutine 2 [select, 3 minutes]:",
        "main.loop()",
        "\t/app/main.go:10 +0x1d",
        "main.main()",
        "\t/app/main.go:5 +0x25",
        "",
        "goroutine 3 [IO wait]:",
        "net/http.(*Server).Serve(0xc000100000, {0x7f0, 0xc0000a2000})",
        "\t/usr/local/go/src/net/http/server.go:3056 +0x2e",
        "main.serve()",
        "\t/app/main.go:22 +0x33",
        "created by main.main in goroutine 1",
        "\t/app/main.go:7 +0x4f",
        "",
    ]
)


@pytest.fixture()
def sample_dump() -> str:
    return SAMPLE_DUMP


@pytest.fixture()
def sample_dump_path(tmp_path: Path) -> Path:
    target = tmp_path / "goroutines.txt"
    target.write_text(SAMPLE_DUMP, encoding="utf-8")
    return target
