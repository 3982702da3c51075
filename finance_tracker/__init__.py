"""Top-level package for the Finance Tracker.

The primary modules are:

* ``db`` – the owner-scoped SQLite record store
* ``transactions``, ``budget_limits``, ``savings_goals``, ``budget_plans``
  and ``income`` – validated, authorized operations on stored records
* ``reporting``, ``budget_comparison``, ``savings_pacing`` and ``advice`` –
  pure functions that turn records into reports
* ``visualization`` – functions that generate Plotly figures

To run the Streamlit app from the command line you can execute:

```bash
python run_app.py
```
"""

from . import reporting  # noqa: F401  # re-exported for convenience
from . import visualization  # noqa: F401  # re-exported for convenience

__version__ = "0.1.0"

__all__ = ["reporting", "visualization"]
