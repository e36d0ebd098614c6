# userdata/formatting.py

import re

CPF_PLACEHOLDER = "000.000.000-00"
_NON_DIGITS = re.compile(r"\D")
_CPF_GROUPS = re.compile(r"^(\d{3})(\d{3})(\d{3})(\d{2})$")


def format_cpf(cpf):
    """
    Display helper, never a validator.

    - None / empty -> placeholder mask
    - exactly 11 digits after stripping -> 000.000.000-00 grouping
    - anything else -> returned unchanged
    """
    if not cpf:
        return CPF_PLACEHOLDER
    cleaned = _NON_DIGITS.sub("", str(cpf))
    if len(cleaned) != 11:
        return cpf
    return _CPF_GROUPS.sub(r"\1.\2.\3-\4", cleaned)


def first_token(text):
    if not text:
        return None
    tokens = str(text).split()
    return tokens[0] if tokens else None


def upper_name(text):
    # plain str.upper, no locale rules
    return str(text).upper() if text else text
