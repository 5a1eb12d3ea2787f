"""
Resume ingest: upload validation, text extraction and contact/topic heuristics.

Supports PDF (PyPDF2) and DOCX (python-docx). Contact details are guessed
with regular expressions; anything not found is left as None so the
interview flow can ask for it.
"""
import io
import logging
import re
from typing import List, Optional, TypedDict

from config import MAX_UPLOAD_BYTES
from errors import FileTooLargeError, TextExtractionError, UnsupportedFileError

logger = logging.getLogger(__name__)

SUPPORTED_EXTENSIONS = (".pdf", ".docx")

EMAIL_REGEX = re.compile(r"\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}\b")
PHONE_REGEX = re.compile(
    r"(?:\+?1[-.\s]?)?\(?([0-9]{3})\)?[-.\s]?([0-9]{3})[-.\s]?([0-9]{4})"
    r"|(\+?\d{1,3}[-.\s]?\d{3,4}[-.\s]?\d{3,4}[-.\s]?\d{3,4})"
)
PHONE_FRAGMENT_REGEX = re.compile(r"\d{3}[-.\s]?\d{3}[-.\s]?\d{4}")

# Lines containing any of these are never taken as the candidate's name
SECTION_HEADERS = [
    "experience", "education", "skills", "objective", "summary",
    "work experience", "employment", "projects", "certifications",
    "achievements", "awards", "references", "contact", "about",
    "professional", "background", "qualification", "technical",
]
URL_FRAGMENTS = ["http", "linkedin", "github", ".com"]

NAME_SEARCH_LINES = 15
NAME_MAX_LENGTH = 50

TECH_KEYWORDS = [
    # Programming languages
    "JavaScript", "TypeScript", "Python", "Java", "C++", "C#", "Go", "Rust", "PHP", "Ruby",
    # Frontend
    "React", "Angular", "Vue.js", "HTML", "CSS", "SASS", "LESS", "Webpack", "Vite", "Next.js", "Nuxt.js",
    # Backend
    "Node.js", "Express", "Django", "Flask", "Spring Boot", "ASP.NET", "FastAPI", "GraphQL", "REST",
    # Databases
    "MongoDB", "PostgreSQL", "MySQL", "Redis", "Firebase", "Cassandra", "Oracle", "SQL Server",
    # DevOps & cloud
    "Docker", "Kubernetes", "AWS", "Azure", "GCP", "Jenkins", "GitLab CI", "GitHub Actions", "CI/CD",
    "Terraform", "Ansible",
    # Frameworks & libraries
    "jQuery", "Lodash", "Express.js", "Pandas", "NumPy", "TensorFlow", "PyTorch", "Scikit-learn",
    # Tools & concepts
    "Git", "SDLC", "Agile", "Scrum", "Jira", "Linux", "Bash", "Algorithms", "Data Structures", "OOP",
    "Microservices",
    # AI/ML
    "AI", "Machine Learning", "Deep Learning", "NLP", "Computer Vision",
    # Other
    "Full Stack", "Frontend", "Backend", "API", "Testing", "Jest", "Cypress", "Selenium",
]


class ParsedResume(TypedDict):
    text: str
    name: Optional[str]
    email: Optional[str]
    phone: Optional[str]


# =============================================================================
# Upload validation and text extraction
# =============================================================================

def validate_upload(file_name: str, size: int, max_size: int = MAX_UPLOAD_BYTES) -> None:
    """Reject unsupported or oversized files before any parsing."""
    if not file_name or not file_name.lower().endswith(SUPPORTED_EXTENSIONS):
        raise UnsupportedFileError(file_name)
    if size > max_size:
        raise FileTooLargeError(size, max_size)


def _extract_pdf_text(file_bytes: bytes) -> str:
    import PyPDF2

    pdf_reader = PyPDF2.PdfReader(io.BytesIO(file_bytes))
    text_parts = []
    for page in pdf_reader.pages:
        page_text = page.extract_text()
        if page_text:
            text_parts.append(page_text)
    return "\n".join(text_parts)


def _extract_docx_text(file_bytes: bytes) -> str:
    from docx import Document

    doc = Document(io.BytesIO(file_bytes))
    return "\n".join(para.text for para in doc.paragraphs if para.text.strip())


def extract_text_from_bytes(file_bytes: bytes, file_name: str) -> str:
    """
    Extract text content from file bytes.

    Supports: PDF, DOCX
    """
    file_name_lower = file_name.lower()

    try:
        if file_name_lower.endswith(".pdf"):
            text = _extract_pdf_text(file_bytes)
        elif file_name_lower.endswith(".docx"):
            text = _extract_docx_text(file_bytes)
        else:
            raise UnsupportedFileError(file_name)
    except UnsupportedFileError:
        raise
    except Exception as e:
        logger.error(f"Text extraction failed for {file_name}: {e}")
        raise TextExtractionError(details={"file_name": file_name, "reason": str(e)}) from e

    if not text.strip():
        logger.warning(f"{file_name} appears to be empty or image-based")
    logger.debug(f"Extracted {len(text)} characters from {file_name}")
    return text


# =============================================================================
# Contact heuristics
# =============================================================================

def extract_email(text: str) -> Optional[str]:
    match = EMAIL_REGEX.search(text)
    return match.group(0) if match else None


def extract_phone(text: str) -> Optional[str]:
    """
    Find the first phone number, normalized to (XXX) XXX-XXXX when it is a
    10-digit US number. Other formats are returned as written.
    """
    match = PHONE_REGEX.search(text)
    if not match:
        return None

    raw = match.group(0)
    phone = re.sub(r"[^\d+]", "", raw)

    if phone.startswith("+1"):
        phone = phone[2:]
    elif phone.startswith("1") and len(phone) == 11:
        phone = phone[1:]

    if len(phone) == 10 and phone.isdigit():
        return f"({phone[:3]}) {phone[3:6]}-{phone[6:]}"
    return raw.strip()


def _looks_like_name_token(word: str) -> bool:
    if not word[0].isupper() or not word[0].isascii():
        return False
    letter_count = sum(1 for ch in word if ch.isascii() and ch.isalpha())
    return letter_count >= len(word) * 0.7


def extract_name(text: str) -> Optional[str]:
    lines = [line.strip() for line in text.split("\n") if line.strip()]

    for line in lines[:NAME_SEARCH_LINES]:
        if len(line) > NAME_MAX_LENGTH:
            continue

        lowered = line.lower()
        if any(header in lowered for header in SECTION_HEADERS):
            continue
        if "@" in line or PHONE_FRAGMENT_REGEX.search(line):
            continue
        if any(fragment in lowered for fragment in URL_FRAGMENTS):
            continue

        words = line.split()
        if not 2 <= len(words) <= 4:
            continue

        if all(_looks_like_name_token(word) for word in words):
            return " ".join(words)

    return None


def extract_contact_info(text: str) -> dict:
    return {
        "name": extract_name(text),
        "email": extract_email(text),
        "phone": extract_phone(text),
    }


# =============================================================================
# Topics
# =============================================================================

def _keyword_pattern(keyword: str) -> re.Pattern:
    # Lookarounds instead of \b so terms ending in symbols (C++, C#) still match
    return re.compile(rf"(?<!\w){re.escape(keyword)}(?!\w)", re.IGNORECASE)


_KEYWORD_PATTERNS = [(keyword, _keyword_pattern(keyword)) for keyword in TECH_KEYWORDS]


def extract_topics(resume_text: str) -> List[str]:
    """Technology keywords found in the resume, in keyword-list order."""
    if not resume_text:
        return []

    found = []
    for keyword, pattern in _KEYWORD_PATTERNS:
        if keyword not in found and pattern.search(resume_text):
            found.append(keyword)
    return found


def parse_resume(file_bytes: bytes, file_name: str) -> ParsedResume:
    """Validate, extract and analyse an uploaded resume."""
    validate_upload(file_name, len(file_bytes))
    text = extract_text_from_bytes(file_bytes, file_name)
    contact = extract_contact_info(text)
    logger.info(
        f"Parsed {file_name}: name={'found' if contact['name'] else 'missing'}, "
        f"email={'found' if contact['email'] else 'missing'}, "
        f"phone={'found' if contact['phone'] else 'missing'}"
    )
    return ParsedResume(text=text, **contact)
