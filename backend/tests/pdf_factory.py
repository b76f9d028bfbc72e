from fpdf import FPDF


def make_pdf(text: str = "Test document", pages: int = 1) -> bytes:
    pdf = FPDF()
    for page in range(pages):
        pdf.add_page()
        pdf.set_font("Helvetica", "", 12)
        pdf.cell(0, 10, f"{text} - page {page + 1}")
    return bytes(pdf.output())
