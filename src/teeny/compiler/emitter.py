"""
Teeny Code Emitter
==================

Output sink for the generated C code. The parser pushes text fragments
into two append-only buffers:

- **preamble**: includes, the opening of ``main`` and variable declarations
- **body**: the executable statements

``finalize()`` joins the preamble followed by the body. Declarations can
therefore be emitted at any point during parsing and still precede every
statement that uses them.

The emitter knows nothing about the Teeny grammar and does not check
what it is given.
"""


class Emitter:
    """
    Accumulates generated C code in a preamble and a body buffer.

    Example:
        emitter = Emitter()
        emitter.append_declaration("float a;")
        emitter.append_code("a = ")
        emitter.append_code("5")
        emitter.append_code_line(";")
        emitter.finalize()   # "float a;\\na = 5;\\n"
    """

    def __init__(self):
        self._preamble: list[str] = []
        self._body: list[str] = []

    def append_declaration(self, text: str) -> None:
        """Append a line to the preamble."""
        self._preamble.append(text + "\n")

    def append_code(self, text: str) -> None:
        """Append a fragment to the body without a line break."""
        self._body.append(text)

    def append_code_line(self, text: str) -> None:
        """Append a fragment to the body and end the line."""
        self._body.append(text + "\n")

    @property
    def preamble(self) -> str:
        return "".join(self._preamble)

    @property
    def body(self) -> str:
        return "".join(self._body)

    def finalize(self) -> str:
        """Return the complete output: preamble followed by body."""
        return self.preamble + self.body
