"""Utility functions for reinftrack."""

from reinftrack.utils.amount_parser import parse_amount
from reinftrack.utils.cnpj import clean_cnpj, format_cnpj, parse_cnpj
from reinftrack.utils.period_parser import parse_date, parse_period

__all__ = [
    "parse_amount",
    "clean_cnpj",
    "format_cnpj",
    "parse_cnpj",
    "parse_date",
    "parse_period",
]
