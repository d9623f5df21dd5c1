# Proof: natural-log scenarios under error capture and composed capture
from __future__ import annotations

import math
import sys
import warnings
from pathlib import Path

# Ensure repo root is on sys.path so `import collateral` works without installing
REPO_ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(REPO_ROOT))

from collateral import has_error, map_peacefully, map_safely, summary, tally  # noqa: E402


def ln(x):
    if x < 0:
        warnings.warn("NaNs produced", RuntimeWarning)
        return float("nan")
    return math.log(x)


def main() -> None:
    safe = map_safely(["a", 10, 100], math.log)
    assert has_error(safe) == [True, False, False]
    assert safe[0].error.exception_type == "TypeError"
    assert abs(safe[2].result - math.log(100)) < 1e-12
    print(safe)

    peaceful = map_peacefully([4, -2, 9], ln)
    t = tally(peaceful)
    assert t.total == 3
    assert t.counts == {"result": 3, "output": 0, "messages": 0, "warnings": 1, "error": 0}
    assert math.isnan(peaceful[1].result)
    print(peaceful)
    print(summary(peaceful))

    print("log_scenarios_proof OK")


if __name__ == "__main__":
    main()
