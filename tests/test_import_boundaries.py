"""
Import boundary guards.

- src/weeksheet/domain/ is pure policy: no web framework, UI, HTTP or AI SDK
  imports, and nothing from the outer layers of the package.
- src/weeksheet/ui/ talks to the backend through the API client only; it must
  never import services or provider adapters.
- src/weeksheet/services/ must not import fastapi.
"""

import ast
from collections.abc import Callable
from pathlib import Path

REPO_ROOT = Path(__file__).parent.parent
PACKAGE_ROOT = REPO_ROOT / "src" / "weeksheet"

DOMAIN_BANNED_MODULES = {"fastapi", "streamlit", "httpx", "openai", "anthropic", "typer", "uvicorn"}
DOMAIN_BANNED_PREFIXES = (
    "weeksheet.api",
    "weeksheet.services",
    "weeksheet.ui",
    "weeksheet.extraction",
    "weeksheet.cli",
)
UI_BANNED_PREFIXES = ("weeksheet.services", "weeksheet.extraction", "openai", "anthropic")


def _top_level(module_name: str) -> str:
    return module_name.split(".", 1)[0]


def _file_imports_any(path: Path, is_banned: Callable[[str], bool]) -> bool:
    """Parse *path* with AST and return True if any import matches *is_banned*."""
    tree = ast.parse(path.read_text(encoding="utf-8"), filename=str(path))
    for node in ast.walk(tree):
        if isinstance(node, ast.Import):
            if any(is_banned(alias.name) for alias in node.names):
                return True
        elif isinstance(node, ast.ImportFrom):
            if is_banned(node.module or ""):
                return True
    return False


def _violations(root: Path, is_banned: Callable[[str], bool]) -> list[str]:
    return [
        py_file.relative_to(REPO_ROOT).as_posix()
        for py_file in sorted(root.rglob("*.py"))
        if _file_imports_any(py_file, is_banned)
    ]


def test_domain_import_boundaries() -> None:
    def banned(module: str) -> bool:
        return _top_level(module) in DOMAIN_BANNED_MODULES or module.startswith(DOMAIN_BANNED_PREFIXES)

    violations = _violations(PACKAGE_ROOT / "domain", banned)
    assert not violations, (
        "Domain files must stay free of framework/SDK imports:\n"
        + "\n".join(f"  {v}" for v in violations)
    )


def test_ui_import_boundaries() -> None:
    violations = _violations(PACKAGE_ROOT / "ui", lambda m: m.startswith(UI_BANNED_PREFIXES))
    assert not violations, (
        "UI files must go through the API client, not services or providers:\n"
        + "\n".join(f"  {v}" for v in violations)
    )


def test_service_import_boundaries() -> None:
    """Service files must not import from fastapi."""
    violations = _violations(PACKAGE_ROOT / "services", lambda m: m.startswith("fastapi"))
    assert not violations, (
        "Service files must not import fastapi:\n"
        + "\n".join(f"  {v}" for v in violations)
    )
