from dataclasses import dataclass, field
from typing import Any, Optional, TextIO

# Evaluator settings. execute() also accepts a plain dict with the same keys
# (max_gas may be spelled maxGas). A None limit is not enforced.

@dataclass
class Env:
    out: Optional[TextIO] = None
    symbols: dict[str, Any] = field(default_factory=dict)
    max_gas: Optional[int] = None
    max_depth: Optional[int] = None
