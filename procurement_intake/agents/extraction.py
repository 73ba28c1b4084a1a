import logging
from typing import Any, Dict, Optional

from procurement_intake.config import settings
from procurement_intake.database import db
from procurement_intake.models.commodity_group import COMMODITY_GROUPS
from procurement_intake.tools.document_text import (
    DocumentReadError,
    document_text_tool,
    guess_mime_type,
    safe_filename,
)
from procurement_intake.tools.groq_llm import groq_tool
from procurement_intake.tools.line_normalizer import (
    display_discount,
    normalize_order_line,
    reconcile_totals,
)
from procurement_intake.tools.money import to_number

logger = logging.getLogger(__name__)

def _commodity_table() -> str:
    rows = ["| ID  | Category | Commodity Group |", "| --- | --- | --- |"]
    rows += [f"| {g['id']} | {g['category']} | {g['group']} |" for g in COMMODITY_GROUPS]
    return "\n".join(rows)

EXTRACTION_INSTRUCTIONS = """
You convert a vendor offer into a strict JSON object for a procurement request.
Return ONLY JSON with this shape:
{{
    "requestor_name": "string",
    "title": "string (short summary of the purchase)",
    "vendor_name": "string",
    "vat_id": "string",
    "commodity_group": "string (ID from the table below)",
    "department": "string",
    "order_lines": [
        {{
            "position_description": "string",
            "unit_price": float,
            "amount": float,
            "unit": "string",
            "discount": "string like '10%' for percent, a number for an absolute amount, or null",
            "total_price": float
        }}
    ],
    "extras": float,
    "total_cost": float,
    "status": "open"
}}

Rules:
1. Numbers are plain JSON numbers with a dot as decimal separator.
2. Discounts are positive reduction magnitudes: source "-20,00%" -> "20%", source "-5" -> 5.
   Surcharges such as "+10%" are not discounts; use null.
3. For each order line base = unit_price * amount. Percent discount N: total_price = base * (1 - N/100).
   Absolute discount N: total_price = base - N. Clamp at 0 and round to cents. No discount: total_price = base.
4. extras is the sum of taxes, shipping and fees outside the order lines (minus global deductions).
   If the document states a final total, use it as total_cost and set extras = total_cost - sum(total_price).
   Otherwise total_cost = sum(total_price) + extras. Always include extras, even if 0.
5. requestor_name is usually the receiver of the offer, vendor_name the sender.
6. For commodity_group pick the single most relevant ID from this table:
{commodity_table}
"""

TEXT_PROMPT_TEMPLATE = """
Document text:

{document_text}

Return JSON only.
"""

class ExtractionAgent:
    def __init__(self):
        self.instructions = EXTRACTION_INSTRUCTIONS.format(commodity_table=_commodity_table())

    async def extract_from_text(self, text: str) -> Dict[str, Any]:
        """Ask the LLM for the raw request fields of an offer text."""
        prompt = TEXT_PROMPT_TEMPLATE.format(document_text=text[:settings.MAX_PROMPT_CHARS])
        fields = groq_tool.generate_structured(self.instructions, prompt)
        logger.info(f"Extracted {len(fields.get('order_lines') or [])} order lines from offer text")
        return fields

    async def extract_from_file(
        self,
        content: bytes,
        filename: Optional[str] = None,
        content_type: Optional[str] = None
    ) -> Dict[str, Any]:
        """OCR an uploaded offer and extract its raw request fields."""
        mime_type = guess_mime_type(filename, content_type)
        if mime_type is None:
            raise DocumentReadError("Invalid file type. Only PDF, PNG, JPEG allowed.")

        logger.info(f"Reading uploaded offer {safe_filename(filename, mime_type.split('/')[-1])}")
        text = document_text_tool.extract_text(content, mime_type)
        if not text or len(text.strip()) < 10:
            raise DocumentReadError("No readable text found in document")

        return await self.extract_from_text(text)

    async def enrich_fields(self, fields: Dict[str, Any]) -> Dict[str, Any]:
        """
        Normalize raw extraction output into the payload the request form expects.

        Order lines get recomputed totals, money fields become numbers and the
        commodity group is resolved to its canonical record when possible.
        """
        enriched = dict(fields)

        raw_lines = fields.get("order_lines")
        lines = []
        if isinstance(raw_lines, list):
            lines = [normalize_order_line(l) for l in raw_lines if isinstance(l, dict)]
            enriched["order_lines"] = [
                {**line.model_dump(), "discount": display_discount(line)} for line in lines
            ]

        total_cost = to_number(fields["total_cost"]) if fields.get("total_cost") is not None else None
        extras = to_number(fields["extras"]) if fields.get("extras") is not None else None
        enriched["total_cost"], enriched["extras"] = reconcile_totals(lines, total_cost, extras)

        group_input = fields.get("commodity_group_id") or fields.get("commodity_group")
        if isinstance(group_input, int) and not isinstance(group_input, bool):
            group_input = f"{group_input:03d}"
        group = await db.commodity_groups.resolve(group_input if isinstance(group_input, str) else None)
        if group:
            enriched["commodity_group_id"] = group.id
            enriched["commodity_group"] = group.model_dump(by_alias=True)
        else:
            enriched["commodity_group_id"] = ""
            if isinstance(fields.get("commodity_group"), str):
                enriched["commodity_group_text"] = fields["commodity_group"]
            enriched.pop("commodity_group", None)

        return enriched

extraction_agent = ExtractionAgent()
