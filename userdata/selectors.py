# userdata/selectors.py

from userdata.formatting import first_token, format_cpf, upper_name


def display_values(record):
    """
    (first_name, full_name, cpf) as shown on pages, or None when the
    record is missing or incomplete.

    The first name falls back to the first token of the full name
    when only a full name was captured.
    """
    if record is None or not record.is_complete:
        return None
    full_name = record.display_name
    first_name = record.short_name or first_token(full_name) or full_name
    cpf = format_cpf(record.tax_id) if record.tax_id else None
    return first_name, full_name, cpf


def build_selector_values(record) -> dict:
    """
    Marker selector -> text for one record.
    Empty dict when there is nothing to inject.
    """
    values = display_values(record)
    if values is None:
        return {}
    first_name, full_name, cpf = values

    table = {
        # greeting / names
        "[data-user-greeting]": f"Olá, {first_name}!",
        "[data-user-name]": first_name,
        "[data-user-fullname]": full_name,
        "[data-user-fullname-uppercase]": upper_name(full_name),
    }
    if cpf:
        table["[data-user-cpf]"] = cpf

    # page-specific sentences
    table.update({
        "[data-consult-title]": f"Consultando dados de {first_name}",
        "[data-pix-instruction]": f"{first_name}, informe sua chave PIX para receber o valor",
        "[data-review-instruction]": f"{full_name}, revise as informações antes de finalizar o saque",
        "[data-final-instruction]": f"{first_name}, finalize o processo para receber seus valores",
        # receipt
        "#comprovanteNome": upper_name(full_name),
    })
    return table
