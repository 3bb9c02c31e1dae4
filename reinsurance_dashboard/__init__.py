"""
Reinsurance Underwriting Dashboard — analytics backend

Turns a raw policy book export (CSV or Excel) into a canonical policy frame
and serves role-filtered KPIs, underwriting-year tables, country views, and
renewal reports from it.

To swap the file export for a database feed:
    Implement a record source with ``load() -> DataFrame`` (and optionally
    ``version()``) returning rows through transforms.build_policy_frame, and
    hand it to loaders.RecordCache. Nothing downstream changes.

To connect to a front end:
    Call dashboard.get_portfolio_kpis(policies, roles, spec) and friends;
    each returns a plain dict or DataFrame suitable for cards, charts, and
    tables.

To add a new ratio KPI threshold:
    Add an entry to config.KPI_REGISTRY with its direction, unit, threshold
    and amber_band, and make sure kpis.KPISet carries a field of that name.
"""
