import pytest
import sys
from pathlib import Path
from typing import Callable, Dict, List, Optional

# Add src to sys.path so we can import dynamicsheets
SRC_PATH = Path(__file__).resolve().parent.parent / "src"
if SRC_PATH.as_posix() not in sys.path:
    sys.path.insert(0, SRC_PATH.as_posix())


class FixedMeasurer:
    """Measurer with predictable output: one line per newline-separated segment."""

    def __init__(self, line_height_factor: float = 1.2):
        self.line_height_factor = line_height_factor

    def wrap(self, text: str, width: float, font_size: float) -> List[str]:
        return text.split("\n") if text else []

    def line_height(self, font_size: float) -> float:
        return font_size * self.line_height_factor

    def height_of(self, text: str, width: float, font_size: float) -> float:
        return len(self.wrap(text, width, font_size)) * self.line_height(font_size)


class RecordingSink:
    """DocumentSink double recording every drawing call per page."""

    def __init__(self, page_width: float = 612, page_height: float = 792):
        self.page_width = page_width
        self.page_height = page_height
        self.measurer = FixedMeasurer()
        self._page = 1
        self._listeners: List[Callable[[int], None]] = []
        self.ops: Dict[int, List[tuple]] = {1: []}
        self.finished = False

    @property
    def page_number(self) -> int:
        return self._page

    @property
    def page_count(self) -> int:
        return self._page

    def add_page_listener(self, listener) -> None:
        self._listeners.append(listener)

    def add_page(self) -> None:
        for listener in list(self._listeners):
            listener(self._page)
        self._page += 1
        self.ops[self._page] = []

    def draw_text(self, text, x, y, *, font_size, width=None, align="left", color="#111111", max_lines=None):
        self.ops[self._page].append(("text", text, x, y, font_size, width, align, color))

    def draw_line(self, x1, y1, x2, y2, *, color="#000000"):
        self.ops[self._page].append(("line", x1, y1, x2, y2))

    def draw_rect(self, x, y, width, height, *, color="#000000"):
        self.ops[self._page].append(("rect", x, y, width, height))

    def finish(self) -> bytes:
        self.finished = True
        return b"%PDF-recorded"

    # Query helpers

    def texts(self, page: Optional[int] = None) -> List[tuple]:
        pages = [page] if page is not None else sorted(self.ops)
        return [op for p in pages for op in self.ops[p] if op[0] == "text"]

    def text_values(self, page: Optional[int] = None) -> List[str]:
        return [op[1] for op in self.texts(page)]

    def lines(self, page: Optional[int] = None) -> List[tuple]:
        pages = [page] if page is not None else sorted(self.ops)
        return [op for p in pages for op in self.ops[p] if op[0] == "line"]

    def rects(self, page: Optional[int] = None) -> List[tuple]:
        pages = [page] if page is not None else sorted(self.ops)
        return [op for p in pages for op in self.ops[p] if op[0] == "rect"]

    def footer_pages(self) -> List[int]:
        """Pages carrying a "Page N" footer text, one entry per footer drawn."""
        return [
            p for p in sorted(self.ops)
            for op in self.ops[p]
            if op[0] == "text" and str(op[1]).startswith("Page ")
        ]


@pytest.fixture
def recording_sink() -> RecordingSink:
    """Fresh letter-size recording sink."""
    return RecordingSink()


@pytest.fixture
def fixed_measurer() -> FixedMeasurer:
    return FixedMeasurer()


@pytest.fixture
def math_pack_data() -> dict:
    """Small two-framework pack as decoded JSON."""
    return {
        "id": "p1",
        "name": "Pack One",
        "version": "1",
        "scope": "state",
        "frameworks": [
            {
                "id": "fw-math",
                "name": "Math",
                "subjects": ["Math"],
                "grade_bands": ["3-5", "6-8"],
                "standards": [
                    {"code": "4.NF.A.1", "statement": "Equivalent fractions", "grades": ["3-5"], "tags": ["fractions"]},
                    {"code": "6.RP.A.1", "statement": "Understand ratios", "grades": ["6-8"], "tags": ["ratio"]},
                    {"code": "MP.1", "statement": "Make sense of problems", "grades": [], "tags": ["practice"]},
                ],
            },
            {
                "id": "fw-ela",
                "name": "ELA",
                "standards": [
                    {"code": "RL.4.1", "statement": "Refer to details in a text", "grades": ["3-5"]},
                ],
            },
        ],
    }
