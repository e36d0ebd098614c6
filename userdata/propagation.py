# userdata/propagation.py

import logging

from userdata.errors import IncompleteRecord
from userdata.fallback import LiteralFallback
from userdata.formatting import upper_name
from userdata.selectors import build_selector_values, display_values

logger = logging.getLogger(__name__)

RECEIPT_INPUT_ID = "comprovanteNome"
USER_VARIABLES_HOOK = "updateUserVariables"


class PropagationEngine:
    """
    Writes the record into a page.

    Two passes, always both:
    - selector pass: data-* / id markers from build_selector_values()
    - fallback pass: literal sample sentences (see userdata.fallback)
    then the receipt input and the page's user-variables hook.
    """

    def __init__(self, fallback=None):
        self.fallback = fallback or LiteralFallback()

    def schedule(self, page, record_fn):
        """
        Apply now if the page is parsed, otherwise once when it is.
        `record_fn` is read at apply time so the latest save wins.
        """
        if not page.ready:
            logger.debug("Page not parsed yet, deferring propagation")
        page.when_ready(lambda p: self.apply(p, record_fn()))

    def apply(self, page, record):
        try:
            first_name, full_name, cpf = self.require_display_values(record)
        except IncompleteRecord as exc:
            logger.info("Page left untouched: %s", exc)
            return

        before = page.snapshot()
        try:
            self.apply_selectors(page, build_selector_values(record))
            self.fallback.apply(page, first_name, full_name, cpf)
            self.apply_special_elements(page, full_name)
        except Exception:
            logger.exception("Propagation failed, page restored to its template text")
            page.restore(before)

    def require_display_values(self, record):
        if record is None:
            raise IncompleteRecord("no user data available")
        values = display_values(record)
        if values is None:
            raise IncompleteRecord("user data has neither name nor full name")
        return values

    def apply_selectors(self, page, table) -> int:
        updated = 0
        for selector, value in table.items():
            for element in page.select(selector):
                page.set_content(element, value)
                updated += 1
        return updated

    def apply_special_elements(self, page, full_name):
        receipt = page.get_element_by_id(RECEIPT_INPUT_ID)
        if receipt is not None and receipt.name == "input":
            receipt["value"] = upper_name(full_name)

        hook = page.environment.get(USER_VARIABLES_HOOK)
        if hook is not None:
            hook(full_name)
