import json


def _pdf_with_text(text):
    import io
    from reportlab.pdfgen import canvas
    buf = io.BytesIO()
    c = canvas.Canvas(buf)
    c.drawString(72, 720, text)
    c.showPage()
    c.save()
    return buf.getvalue()


def test_filenames():
    from genelinker.export.files import png_filename, report_filename, sanitize_filename
    assert sanitize_filename("TP53: The Guardian!") == "tp53__the_guardian_"
    assert sanitize_filename("") == "untitled"
    assert png_filename("Abc") == "mindmap_abc.png"
    assert report_filename("Abc", "json") == "abc_analysis.json"


def test_json_report_includes_mindmap_data():
    from genelinker.export.report import build_report, export_report
    from genelinker.llm.fallback import mock_analysis
    from genelinker.sources.papers import mock_papers
    paper = mock_papers("crispr").papers[0]
    report = build_report(paper, mock_analysis(paper.title), include_mindmap=True)
    name, data, media = export_report(report, "json")
    assert media == "application/json"
    assert name.endswith("_analysis.json")
    doc = json.loads(data)
    assert doc["paper"]["id"] == "core_001"
    assert doc["mindMapData"] == doc["analysis"]
    assert doc["analysis"]["confidence_score"] == 0.87


def test_pdf_report_with_map_image():
    from genelinker.export.report import build_report, export_report
    from genelinker.llm.fallback import mock_analysis
    from genelinker.mindmap.layout import layout_mindmap
    from genelinker.mindmap.render import png_bytes, render_mindmap
    a = mock_analysis("Uploaded <draft> & notes")
    png = png_bytes(render_mindmap(layout_mindmap(a)))
    name, data, media = export_report(build_report(None, a), "PDF", mindmap_png=png)
    assert media == "application/pdf"
    assert name == "uploaded__draft____notes_analysis.pdf"
    assert data.startswith(b"%PDF")


def test_unknown_format_rejected():
    import pytest
    from genelinker.errors import UserInputError
    from genelinker.export.report import build_report, export_report
    from genelinker.llm.fallback import mock_analysis
    with pytest.raises(UserInputError):
        export_report(build_report(None, mock_analysis()), "docx")


def test_pdf_text_extraction():
    import pytest
    from genelinker.errors import UserInputError
    from genelinker.ingest.pdf_text import extract_pdf_text, looks_like_pdf
    assert "Telomere attrition" in extract_pdf_text(_pdf_with_text("Telomere attrition in aging"))
    with pytest.raises(UserInputError):
        extract_pdf_text(b"")
    with pytest.raises(UserInputError):
        extract_pdf_text(b"definitely not a pdf")
    assert looks_like_pdf("x.PDF", None)
    assert looks_like_pdf("blob", "application/pdf; charset=binary")
    assert not looks_like_pdf("notes.txt", "text/plain")
