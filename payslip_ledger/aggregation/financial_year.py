"""Indian financial-year helpers (April to March)."""

FY_MONTH_ORDER: tuple[str, ...] = (
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
    "January",
    "February",
    "March",
)

_CLOSING_MONTHS = frozenset({"January", "February", "March"})

_MONTH_LOOKUP: dict[str, str] = {}
for _name in FY_MONTH_ORDER:
    _MONTH_LOOKUP[_name.lower()] = _name
    _MONTH_LOOKUP[_name[:3].lower()] = _name


def canonical_month(month: str | None) -> str | None:
    """Map 'march', 'Mar' or ' March ' to 'March'; unknown names give None."""
    if not month:
        return None
    return _MONTH_LOOKUP.get(month.strip().lower())


def financial_year_label(month: str | None, year: int) -> str:
    """January to March of year Y belong to 'Y-1-Y'; every other month to 'Y-Y+1'."""
    if canonical_month(month) in _CLOSING_MONTHS:
        return f"{year - 1}-{year}"
    return f"{year}-{year + 1}"


def fy_month_index(month: str | None) -> int:
    """Position of month inside a financial year; unknown months sort last."""
    name = canonical_month(month)
    if name is None:
        return len(FY_MONTH_ORDER)
    return FY_MONTH_ORDER.index(name)


def fy_start_year(label: str) -> int:
    return int(label.split("-", 1)[0])
