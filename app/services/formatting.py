def format_emission(value: float) -> str:
    """Per-entry emission: one decimal from 1000 kg up, two below."""
    if value >= 1000:
        return f"{value:.1f}"
    return f"{value:.2f}"


def format_total(value: float) -> str:
    return f"{value:.2f}"


def format_distance(value: float) -> str:
    return f"{value:.1f}"
