# userdata/hooks.py

import json
import re

from userdata.page import escape_raw_text

SCRIPT_VARIABLE = "nomeUsuario"


def update_script_variable(page, name, value) -> bool:
    """
    Rewrite the string literal of an inline `var|let|const <name> = "..."`.
    Pages that never declare the variable are left alone.
    """
    pattern = re.compile(
        r"(\b(?:var|let|const)\s+" + re.escape(name) + r"\s*=\s*)"
        r"(\"(?:\\.|[^\"\\])*\"|'(?:\\.|[^'\\])*')"
    )
    literal = escape_raw_text(json.dumps(value, ensure_ascii=False))
    found = False

    for script in page.soup.find_all("script"):
        source = script.string
        if not source or not pattern.search(source):
            continue
        rewritten = pattern.sub(lambda m: m.group(1) + literal, str(source), count=1)
        # keep the Script string type so the source is emitted unescaped
        source.replace_with(type(source)(rewritten))
        found = True
    return found


def install_user_variables_hook(page, name: str = SCRIPT_VARIABLE):
    page.environment["updateUserVariables"] = (
        lambda full_name: update_script_variable(page, name, full_name)
    )
