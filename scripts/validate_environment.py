#!/usr/bin/env python3
"""Validate local access-simulator environment readiness."""

from __future__ import annotations

import importlib
import json
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from backend.repository.policy_repository import PolicyRepository
from backend.services.simulation_service import SimulationService
from backend.utils.config import get_settings

SEPARATOR_LINE = "=" * 44
EXPECTED_SAMPLE_GRANTS = 7


def _print_result(name: str, success: bool, detail: str = "") -> tuple[bool, str]:
    if success:
        return True, f"[PASS] {name}{detail}"
    return False, f"[FAIL] {name}: {detail}"


def main() -> int:
    results: list[str] = []
    all_passed = True

    # CHECK 1 — Python version >= 3.10
    if sys.version_info >= (3, 10):
        ok, line = _print_result("Python " + sys.version.split()[0], True)
    else:
        ok, line = _print_result(
            "Python version >= 3.10",
            False,
            f"found {sys.version.split()[0]}",
        )
    results.append(line)
    all_passed = all_passed and ok

    # CHECK 2 — Required packages importable
    package_specs = [
        ("fastapi", "fastapi"),
        ("uvicorn", "uvicorn"),
        ("pydantic", "pydantic"),
        ("pandas", "pandas"),
        ("requests", "requests"),
        ("streamlit", "streamlit"),
        ("httpx", "httpx"),
        ("pytest", "pytest"),
    ]
    import_errors: list[str] = []
    for module_name, dist_name in package_specs:
        try:
            importlib.import_module(module_name)
        except ImportError as exc:
            import_errors.append(f"{dist_name} ({exc})")
    if import_errors:
        ok, line = _print_result(
            "Required packages",
            False,
            "missing/unimportable -> " + "; ".join(import_errors),
        )
    else:
        ok, line = _print_result("Required packages: all importable", True)
    results.append(line)
    all_passed = all_passed and ok

    settings = get_settings()
    repository = PolicyRepository(settings)

    # CHECK 3 — Room policy table
    try:
        policies = repository.list_room_policies()
        if not policies:
            raise RuntimeError("policy table is empty")
        source = settings.room_policy_path or "defaults"
        ok, line = _print_result("Room policies", True, f": {len(policies)} rooms from {source}")
    except Exception as exc:
        ok, line = _print_result("Room policies", False, str(exc))
    results.append(line)
    all_passed = all_passed and ok

    # CHECK 4 — Sample batch simulation (built-in policies only)
    if settings.room_policy_path is None:
        try:
            service = SimulationService(repository=repository, settings=settings)
            report = service.run_payload(json.dumps(repository.sample_requests()))
            if report.summary.granted != EXPECTED_SAMPLE_GRANTS:
                raise RuntimeError(
                    f"expected {EXPECTED_SAMPLE_GRANTS} grants, got {report.summary.granted}"
                )
            ok, line = _print_result(
                "Sample simulation",
                True,
                f": {report.summary.granted} granted / {report.summary.denied} denied",
            )
        except Exception as exc:
            ok, line = _print_result("Sample simulation", False, str(exc))
        results.append(line)
        all_passed = all_passed and ok

    print(SEPARATOR_LINE)
    print(" Access Simulator Environment Validation")
    print(SEPARATOR_LINE)
    for line in results:
        print(f" {line}")
    print(SEPARATOR_LINE)
    if all_passed:
        print(" All checks passed. Environment is ready.")
        print(SEPARATOR_LINE)
        return 0
    print(" One or more checks failed.")
    print(SEPARATOR_LINE)
    return 1


if __name__ == "__main__":
    raise SystemExit(main())
