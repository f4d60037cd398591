"""Currency reference data: supported ISO codes, display names and symbols."""

CURRENCY_NAMES: dict[str, str] = {
    "USD": "US Dollar", "CAD": "Canadian Dollar", "GBP": "British Pound",
    "EUR": "Euro", "CHF": "Swiss Franc", "SEK": "Swedish Krona",
    "NOK": "Norwegian Krone", "DKK": "Danish Krone", "PLN": "Polish Zloty",
    "CZK": "Czech Koruna", "HUF": "Hungarian Forint", "ISK": "Icelandic Krona",
    "TRY": "Turkish Lira",
    # Asia-Pacific
    "JPY": "Japanese Yen", "CNY": "Chinese Yuan", "HKD": "Hong Kong Dollar",
    "TWD": "New Taiwan Dollar", "KRW": "South Korean Won", "SGD": "Singapore Dollar",
    "THB": "Thai Baht", "MYR": "Malaysian Ringgit", "IDR": "Indonesian Rupiah",
    "PHP": "Philippine Peso", "VND": "Vietnamese Dong", "INR": "Indian Rupee",
    "AUD": "Australian Dollar", "NZD": "New Zealand Dollar",
    # Middle East / Africa
    "AED": "UAE Dirham", "QAR": "Qatari Riyal", "SAR": "Saudi Riyal",
    "ILS": "Israeli Shekel", "ZAR": "South African Rand", "EGP": "Egyptian Pound",
    "MAD": "Moroccan Dirham",
    # Americas
    "MXN": "Mexican Peso", "BRL": "Brazilian Real", "ARS": "Argentine Peso",
    "CLP": "Chilean Peso", "COP": "Colombian Peso", "PEN": "Peruvian Sol",
}

CURRENCY_SYMBOLS: dict[str, str] = {
    "USD": "$", "CAD": "CA$", "GBP": "£", "EUR": "€",
    "JPY": "¥", "CNY": "CN¥", "AUD": "A$", "NZD": "NZ$",
    "SGD": "S$", "HKD": "HK$", "INR": "₹", "KRW": "₩",
    "TWD": "NT$", "THB": "฿", "PHP": "₱", "VND": "₫",
    "ILS": "₪", "TRY": "₺", "MXN": "MX$", "BRL": "R$",
    "CHF": "CHF ", "ZAR": "R",
}


def format_price(amount: float, currency: str = "USD") -> str:
    """Format an amount with its currency symbol, to the cent."""
    symbol = CURRENCY_SYMBOLS.get(currency, currency + " ")
    sign = "-" if amount < 0 else ""
    return f"{sign}{symbol}{abs(amount):,.2f}"
