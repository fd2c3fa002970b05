"""
Rule components of the maintenance engine.

Each subpackage is a stateless module taking explicit snapshots:
pricing, schedule, blackout, lifecycle, loyalty, orders.
"""
