"""
depcheck Application Layer.

**Core Components:**

1. **Error Handling** (`errors.py`):
   - `DepcheckError` and the fatal conditions derived from it
   - Diagnostic classifications recorded in a `DiagnosticLog`

2. **Context Management** (`context.py`):
   - `AnalysisOptions`: Settings of a run
   - `AnalysisContext`: Options, diagnostics and statistics of a run

3. **Analysis Driver** (`pipeline.py`):
   - `analyze_procedure`: Post-dominator tree and CDG of one procedure
   - `analyze_procedures`: The same for many procedures on a thread pool

**Usage:**
```python
from depcheck.application import AnalysisOptions, analyze_procedures

results = analyze_procedures(cfgs, AnalysisOptions(strict=True))
for result in results:
    result.diagnostics.finalize()
```
"""

from .errors import DepcheckError, AnalysisAbort
from .context import AnalysisContext, AnalysisOptions
from .pipeline import ProcedureResult, analyze_procedure, analyze_procedures

__all__ = [
    "DepcheckError", "AnalysisAbort",
    "AnalysisContext", "AnalysisOptions",
    "ProcedureResult", "analyze_procedure", "analyze_procedures",
]
