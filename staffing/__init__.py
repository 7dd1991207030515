"""
Anaesthesia Staffing Console: hospital allocations and anaesthesiologist assignments.
Keeps hospitals and people in sync with the record store and derives coverage for the dashboard.
"""

__version__ = "1.0.0"
