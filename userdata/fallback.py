# userdata/fallback.py
#
# Compatibility shim for legacy markup without data-* markers:
# literal sample sentences baked into old templates are swapped for the
# real values. Breaks as soon as template wording changes, so it lives
# behind TextSubstitution and can be replaced without touching callers.

import logging
from abc import ABC, abstractmethod

logger = logging.getLogger(__name__)

SAMPLE_FIRST_NAME = "Silvio"
SAMPLE_FULL_NAME = "João Silva"
SAMPLE_CPF = "717.148.209-04"


class TextSubstitution(ABC):
    """Rewrites the text nodes of a page for one set of display values."""

    @abstractmethod
    def apply(self, page, first_name, full_name, cpf=None) -> int:
        ...


class LiteralFallback(TextSubstitution):

    def replacements(self, first_name, full_name, cpf=None):
        pairs = [
            (f"Olá, {SAMPLE_FIRST_NAME}!", f"Olá, {first_name}!"),
            (f"Consultando dados de {SAMPLE_FIRST_NAME}", f"Consultando dados de {first_name}"),
        ]
        if cpf:
            pairs.append((SAMPLE_CPF, cpf))
        pairs += [
            (
                f"{SAMPLE_FIRST_NAME}, informe sua chave PIX para receber o valor",
                f"{first_name}, informe sua chave PIX para receber o valor",
            ),
            (
                f"{SAMPLE_FULL_NAME}, revise as informações antes de finalizar o saque",
                f"{full_name}, revise as informações antes de finalizar o saque",
            ),
            (
                f"{SAMPLE_FIRST_NAME}, finalize o processo para receber seus valores",
                f"{first_name}, finalize o processo para receber seus valores",
            ),
        ]
        return pairs

    def apply(self, page, first_name, full_name, cpf=None) -> int:
        changed = 0
        for old, new in self.replacements(first_name, full_name, cpf):
            changed += page.replace_text(old, new)
        if changed:
            logger.info("Fallback pass rewrote %d text node(s)", changed)
        return changed
