"""
Payment Extraction Prompts

Prompt builder for extracting payment fields from OCR text of
Portuguese payment receipts.
"""

from datetime import date

PAYMENT_EXTRACTION_PROMPT = """
<text>
  {text}
</text>
The text above is extracted from a payment receipt in Portuguese. Be concise to avoid errors.
Today's date is {today}.
Extract the following structured information:

1. The amount paid (value) with discount if mentioned
2. The payment date
3. The institution that received the payment (the payee)
  - This is found normally in the "Destino", "nome Favorecido" section
  - Look specifically for the entity name after "Nome" in the "Destino" section
  - The institution is the entity receiving the payment (not the bank handling the transaction)
  - Common examples include utility companies, government agencies, service providers, etc. (not the bank itself)

  Respond ONLY with a JSON object in the following format:

{{
  "amount": [the amount as a float number],
  "payment_date": "[yyyy-mm-dd, if it doesnt have a year or the full date, use the current year, month and day if necessary]",
  "institution": "[full name of the recipient entity]"
}}
"""


def build_payment_extraction_prompt(text: str, today: date | None = None) -> str:
    """
    Build the payment extraction prompt for a receipt's OCR text.

    Args:
        text: Raw OCR text of the receipt
        today: Date used to backfill a partial payment date (defaults to today)

    Returns:
        Prompt string for a single user message
    """
    today = today or date.today()
    return PAYMENT_EXTRACTION_PROMPT.format(text=text, today=today.isoformat())
