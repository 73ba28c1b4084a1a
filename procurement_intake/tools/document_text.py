import io
import logging
import re
from typing import List, Optional
from PIL import Image
import pytesseract
import pdf2image
from google.cloud import vision

from procurement_intake.config import settings

logger = logging.getLogger(__name__)

SUPPORTED_MIME_TYPES = ("application/pdf", "image/png", "image/jpeg")

class DocumentReadError(Exception):
    """Raised when an uploaded offer cannot be turned into text."""

def safe_filename(original: Optional[str], extension: str = ".pdf") -> str:
    """Strip directories and odd characters and force the given extension."""
    ext = extension.lower() if extension.startswith(".") else f".{extension.lower()}"
    base = re.split(r"[\\/]", original or "")[-1] or "document"
    cleaned = re.sub(r"[^A-Za-z0-9._-]+", "_", base.rstrip().rstrip("."))
    root = re.sub(r"\.[^.]+$", "", cleaned) or "document"
    return f"{root}{ext}"

def guess_mime_type(filename: Optional[str], content_type: Optional[str]) -> Optional[str]:
    if content_type in SUPPORTED_MIME_TYPES:
        return content_type
    name = (filename or "").lower()
    if name.endswith(".pdf"):
        return "application/pdf"
    if name.endswith(".png"):
        return "image/png"
    if name.endswith((".jpg", ".jpeg")):
        return "image/jpeg"
    return None

class DocumentTextTool:
    def __init__(self):
        self.use_google_vision = bool(settings.GOOGLE_APPLICATION_CREDENTIALS)
        self.vision_client = None
        if self.use_google_vision:
            try:
                self.vision_client = vision.ImageAnnotatorClient()
            except Exception as e:
                logger.warning(f"Failed to init Google Vision client: {e}. Falling back to Tesseract.")
                self.use_google_vision = False

    def extract_text(self, content: bytes, mime_type: str) -> str:
        """Render the offer into page images and OCR them into one text."""
        if mime_type not in SUPPORTED_MIME_TYPES:
            raise DocumentReadError(f"Unsupported document type: {mime_type}")

        try:
            pages = self._load_pages(content, mime_type)
            if self.use_google_vision:
                return "\n\n".join(self._ocr_google_vision(page) for page in pages)
            return "\n\n".join(pytesseract.image_to_string(page) for page in pages)
        except DocumentReadError:
            raise
        except Exception as e:
            logger.error(f"OCR failed: {e}")
            raise DocumentReadError(f"Could not read document: {e}") from e

    def _load_pages(self, content: bytes, mime_type: str) -> List[Image.Image]:
        if mime_type == "application/pdf":
            return pdf2image.convert_from_bytes(content)
        return [Image.open(io.BytesIO(content))]

    def _ocr_google_vision(self, page: Image.Image) -> str:
        buffer = io.BytesIO()
        page.save(buffer, format="PNG")

        response = self.vision_client.text_detection(image=vision.Image(content=buffer.getvalue()))
        if response.error.message:
            raise DocumentReadError(response.error.message)

        texts = response.text_annotations
        return texts[0].description if texts else ""

document_text_tool = DocumentTextTool()
