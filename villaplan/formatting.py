"""Belgian number conventions for report text: ``1.234,56`` and ``€1.234``."""


def format_number(n, decimals=2):
    """Format ``n`` with ``.`` as thousands separator and ``,`` as decimal mark."""
    text = f"{float(n):,.{decimals}f}"
    return text.replace(",", "\x00").replace(".", ",").replace("\x00", ".")


def format_eur(n, decimals=0):
    """Euro amount such as ``€1.234`` (or ``-€1.234``)."""
    n = float(n)
    sign = "-" if n < 0 and round(abs(n), decimals) != 0 else ""
    return f"{sign}€{format_number(abs(n), decimals)}"


def format_pct(n):
    """Rate as typed by the user: ``4`` -> ``4``, ``4.25`` -> ``4.25``."""
    return f"{float(n):g}"
