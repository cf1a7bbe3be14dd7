"""Text cleaning and normalization utilities."""
import re
import unicodedata
from types import MappingProxyType
from typing import List, Mapping, Tuple

from academic_assistant.models.document import Section

# Mis-decoded UTF-8 sequences (UTF-8 bytes read as cp1252)
ENCODING_FIXES: Tuple[Tuple[str, str], ...] = (
    ("â€™", "'"),
    ("â€œ", '"'),
    ("â€\u009d", '"'),
    ("â€“", "–"),
    ("â€”", "—"),
    ("â€¢", "•"),
    ("â€¦", "…"),
    ("Â", ""),
    ("Ã¡", "á"),
    ("Ã©", "é"),
    ("Ã­", "í"),
    ("Ã³", "ó"),
    ("Ãº", "ú"),
    ("Ã±", "ñ"),
    ("Ã§", "ç"),
)

INVALID_CHARACTERS = re.compile(r"[\uFFFD\uFEFF\x00]")

# Literal OCR substitutions
OCR_SUBSTITUTIONS: Tuple[Tuple[str, str], ...] = (
    ("ﬁ", "fi"),
    ("ﬂ", "fl"),
    ("ﬀ", "ff"),
    ("ﬃ", "ffi"),
    ("ﬄ", "ffl"),
    ("â€™", "'"),
    ("â€œ", '"'),
    ("â€\u009d", '"'),
)

# Pattern-based OCR repairs, applied in order
OCR_PATTERN_FIXES: Tuple[Tuple["re.Pattern[str]", str], ...] = (
    # Words hyphenated across a line break
    (re.compile(r"(\w)-[ \t]*\n[ \t]*(\w)"), r"\1\2"),
    # Whitespace before punctuation
    (re.compile(r"[ \t]+([,.;:!?])"), r"\1"),
    # Broken URLs and e-mail addresses
    (re.compile(r"(https?://)\s+"), r"\1"),
    (re.compile(r"(\w+@)\s+(\w+\.\w+)"), r"\1\2"),
)

# Runs of single digits separated by spaces, e.g. "2 0 2 3"
SPACED_DIGITS = re.compile(r"\b\d(?:[ \t]+\d){2,}\b")

ACADEMIC_ACRONYMS: Mapping[str, str] = MappingProxyType({
    "AI": "Artificial Intelligence",
    "ML": "Machine Learning",
    "NLP": "Natural Language Processing",
    "CV": "Computer Vision",
    "DL": "Deep Learning",
    "NN": "Neural Network",
    "CNN": "Convolutional Neural Network",
    "RNN": "Recurrent Neural Network",
    "LSTM": "Long Short-Term Memory",
    "GAN": "Generative Adversarial Network",
    "API": "Application Programming Interface",
    "HTTP": "HyperText Transfer Protocol",
    "URL": "Uniform Resource Locator",
    "PDF": "Portable Document Format",
    "RGB": "Red Green Blue",
    "CPU": "Central Processing Unit",
    "GPU": "Graphics Processing Unit",
    "RAM": "Random Access Memory",
    "SSD": "Solid State Drive",
    "HDD": "Hard Disk Drive",
    "UI": "User Interface",
    "UX": "User Experience",
    "IoT": "Internet of Things",
    "VR": "Virtual Reality",
    "AR": "Augmented Reality",
    "MR": "Mixed Reality",
})

HEADING_PATTERNS: Tuple["re.Pattern[str]", ...] = (
    re.compile(r"^\d+\.\s+.+"),
    re.compile(r"^\d+\.\d+\s+.+"),
    re.compile(r"^[A-Z\s]{5,50}$"),
    re.compile(r"^[A-Z][a-z].*[^.!?]$"),
    re.compile(r"^(Chapter|Section|Part)\s+\d+", re.IGNORECASE),
    re.compile(
        r"^(Abstract|Introduction|Methodology|Results|Discussion|Conclusion|References|Appendix)",
        re.IGNORECASE,
    ),
)

MAX_HEADING_LENGTH = 200


def fix_encoding(text: str) -> str:
    """
    Repair mis-decoded characters and normalize to NFKC.

    Args:
        text: Raw extracted text

    Returns:
        Text with known mojibake replaced and invalid code points removed
    """
    for broken, fixed in ENCODING_FIXES:
        text = text.replace(broken, fixed)
    text = INVALID_CHARACTERS.sub("", text)
    return unicodedata.normalize("NFKC", text)


def correct_ocr_errors(text: str) -> str:
    """
    Apply a fixed table of common OCR misrecognition repairs.

    Args:
        text: Text to correct

    Returns:
        Text with ligatures expanded, hyphen-broken words rejoined,
        spaced digit runs collapsed and broken links repaired
    """
    for error, correction in OCR_SUBSTITUTIONS:
        text = text.replace(error, correction)

    for pattern, replacement in OCR_PATTERN_FIXES:
        text = pattern.sub(replacement, text)

    return SPACED_DIGITS.sub(lambda m: re.sub(r"\s+", "", m.group(0)), text)


def normalize_whitespace(text: str) -> str:
    """Collapse spaces, normalize line endings and cap blank lines at one."""
    text = re.sub(r"[\u00A0\u2000-\u200A\u202F\u205F\u3000]", " ", text)
    text = re.sub(r"[ \t]+", " ", text)
    text = text.replace("\r\n", "\n").replace("\r", "\n")
    text = re.sub(r"\n{3,}", "\n\n", text)
    text = re.sub(r"[ \t]+$", "", text, flags=re.MULTILINE)
    return text.strip()


def standardize_formatting(text: str) -> str:
    """Unify quote, dash, ellipsis and bullet glyphs and fix punctuation spacing."""
    text = re.sub(r"[“”]", '"', text)
    text = re.sub(r"[‘’]", "'", text)
    text = re.sub(r"[‒–—]", "–", text)
    text = re.sub(r"\.{3,}", "…", text)
    text = re.sub(r"\s+([,.;:!?])", r"\1", text)
    text = re.sub(r"([.!?])([A-Z])", r"\1 \2", text)
    text = re.sub(r"[•▪▫‣⁃]", "•", text)
    text = re.sub(r"!{2,}", "!", text)
    text = re.sub(r"\?{2,}", "?", text)
    return text


def expand_acronyms(text: str, acronyms: Mapping[str, str] = ACADEMIC_ACRONYMS) -> str:
    """
    Expand known acronyms.

    The first occurrence of each acronym becomes "Expansion (ACR)", later
    occurrences are replaced by the expansion alone.
    """
    for acronym, expansion in acronyms.items():
        pattern = re.compile(rf"\b{re.escape(acronym)}\b")
        seen = []

        def _replace(match: "re.Match[str]") -> str:
            if not seen:
                seen.append(True)
                return f"{expansion} ({acronym})"
            return expansion

        text = pattern.sub(_replace, text)
    return text


def is_heading(line: str) -> bool:
    """Check whether a stripped line looks like a section heading."""
    if not line or len(line) > MAX_HEADING_LENGTH:
        return False
    return any(pattern.search(line) for pattern in HEADING_PATTERNS)


def clean_heading(heading: str) -> str:
    """Strip numbering and chapter/section prefixes from a heading."""
    heading = re.sub(r"^\d+\.?\s*", "", heading)
    heading = re.sub(r"^(Chapter|Section|Part)\s+\d+:?\s*", "", heading, flags=re.IGNORECASE)
    return heading.strip()


def extract_sections(text: str) -> List[Section]:
    """
    Group lines under detected headings.

    Args:
        text: Cleaned text

    Returns:
        Sections with the character offset where each heading line starts
        and where the next heading (or the text) ends
    """
    sections: List[Section] = []
    current = None
    offset = 0

    for raw_line in text.split("\n"):
        line_start = offset
        offset += len(raw_line) + 1
        line = raw_line.strip()

        if is_heading(line):
            if current is not None:
                sections.append(Section(end_index=line_start, **current))
            current = {"title": clean_heading(line), "content": "", "start_index": line_start}
        elif current is not None and line:
            current["content"] += ("\n" if current["content"] else "") + line

    if current is not None:
        sections.append(Section(end_index=len(text), **current))

    return sections
