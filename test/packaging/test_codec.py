#!/usr/bin/env python3
"""Tests for the template body codec (plain text and Office packages)."""

import io
import sys
import zipfile
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent.parent))

import pytest

from docfill.exceptions import UnsupportedTemplateError
from docfill.packaging import (
    ContainerKind,
    DocumentFiller,
    decode_text,
    detect_container,
    encode_text,
    is_text_part,
    placeholder_names,
)
from docfill.validation.models import DocumentFormat


@pytest.fixture
def word_filler(logger):
    return DocumentFiller(DocumentFormat.WORD, logger=logger)


@pytest.fixture
def excel_filler(logger):
    return DocumentFiller(DocumentFormat.EXCEL, logger=logger)


class TestContainerDetection:
    def test_zip_magic_is_a_package(self, make_docx):
        assert detect_container(make_docx("hello")) == ContainerKind.OOXML

    def test_anything_else_is_text(self):
        assert detect_container(b"Dear {{name}}") == ContainerKind.TEXT
        assert detect_container(b"") == ContainerKind.TEXT

    @pytest.mark.parametrize(
        "member,expected",
        [
            ("word/document.xml", True),
            ("word/header1.xml", True),
            ("word/footer2.xml", True),
            ("word/footnotes.xml", True),
            ("xl/sharedStrings.xml", True),
            ("xl/worksheets/sheet3.xml", True),
            ("word/styles.xml", False),
            ("word/media/image1.png", False),
            ("[Content_Types].xml", False),
            ("xl/workbook.xml", False),
        ],
    )
    def test_textual_parts(self, member, expected):
        assert is_text_part(member) is expected


class TestTextBodies:
    """Plain bodies are decoded, filled and re-encoded"""

    def test_fill_plain_text(self, word_filler):
        result = word_filler.fill(
            b"Dear {{company_name}}, your claim {{claim_id}} is approved.",
            {"company_name": "Acme", "claim_id": "42"},
        )
        assert result.container == ContainerKind.TEXT
        assert result.data == b"Dear Acme, your claim 42 is approved."
        assert result.leftover_placeholders == 0

    def test_undecodable_bytes_round_trip(self, excel_filler):
        data = b"\xff\xfe {{a}} \x80\x81"
        result = excel_filler.fill(data, {"a": "X"})
        assert result.data == b"\xff\xfe X \x80\x81"

    def test_decode_encode_is_lossless(self):
        data = bytes(range(256))
        assert encode_text(decode_text(data)) == data

    def test_ascii_without_placeholders_is_byte_identical(self, word_filler):
        data = b"Nothing to fill here.\r\nSecond line\t{ }"
        assert word_filler.fill(data, {"name": "value"}).data == data

    def test_utf8_values(self, excel_filler):
        result = excel_filler.fill("Grüße {{who}}".encode("utf-8"), {"who": "Zoë"})
        assert result.data.decode("utf-8") == "Grüße Zoë"

    def test_text_values_are_not_xml_escaped(self, excel_filler):
        result = excel_filler.fill(b"{{a}}", {"a": "<b>&"})
        assert result.data == b"<b>&"

    def test_leftovers_are_counted(self, excel_filler):
        result = excel_filler.fill(b"{{a}} {{b}} {{ c }}", {"a": "1"})
        assert result.leftover_placeholders == 2
        assert result.replacements == {"a": 1}


class TestOfficePackages:
    """Only textual XML parts are rewritten"""

    def test_word_document_part_filled(self, word_filler, make_docx, package_part):
        template = make_docx("Dear {{company_name}},", "Claim {{ claim_id }} approved.")
        result = word_filler.fill(template, {"company_name": "Acme", "claim_id": 42})

        document = package_part(result.data, "word/document.xml")
        assert result.container == ContainerKind.OOXML
        assert "Dear Acme," in document
        assert "Claim 42 approved." in document
        assert result.parts == ["word/document.xml"]
        assert result.replacements == {"company_name": 1, "claim_id": 1}

    def test_values_are_xml_escaped(self, word_filler, make_docx, package_part):
        result = word_filler.fill(make_docx("{{company_name}}"), {"company_name": "Acme & <Sons>"})
        assert "Acme &amp; &lt;Sons&gt;" in package_part(result.data, "word/document.xml")

    def test_fragmented_word_run(self, word_filler, make_docx, package_part):
        template = make_docx("{{</w:t></w:r><w:r><w:t>company_name}}")
        result = word_filler.fill(template, {"company_name": "Acme"})
        assert "<w:r><w:t>Acme</w:t></w:r>" in package_part(result.data, "word/document.xml")

    def test_headers_and_footers_filled(self, word_filler, make_docx, package_part):
        template = make_docx(
            "body",
            extra_parts={
                "word/header1.xml": "<w:hdr>{{company_name}}</w:hdr>",
                "word/styles.xml": "<w:styles>{{company_name}}</w:styles>",
            },
        )
        result = word_filler.fill(template, {"company_name": "Acme"})

        assert package_part(result.data, "word/header1.xml") == "<w:hdr>Acme</w:hdr>"
        # non-text parts are copied as they were
        assert package_part(result.data, "word/styles.xml") == "<w:styles>{{company_name}}</w:styles>"

    def test_excel_shared_strings_filled_and_media_untouched(self, excel_filler, make_xlsx, package_part):
        template = make_xlsx("Company: {{company_name}}", "Claim {{claim_id}}")
        result = excel_filler.fill(template, {"company_name": "Acme", "claim_id": "7"})

        shared = package_part(result.data, "xl/sharedStrings.xml")
        assert "<t>Company: Acme</t>" in shared
        assert "<t>Claim 7</t>" in shared

        with zipfile.ZipFile(io.BytesIO(template)) as before, zipfile.ZipFile(
            io.BytesIO(result.data)
        ) as after:
            assert after.read("xl/media/logo.png") == before.read("xl/media/logo.png")
            assert after.namelist() == before.namelist()
            assert after.testzip() is None

    def test_leftovers_counted_across_parts(self, word_filler, make_docx):
        template = make_docx(
            "{{company_name}} {{unknown}}",
            extra_parts={"word/footer1.xml": "<w:ftr>{{other}}</w:ftr>"},
        )
        result = word_filler.fill(template, {"company_name": "Acme"})
        assert result.leftover_placeholders == 2

    def test_corrupt_package_rejected(self, word_filler):
        with pytest.raises(UnsupportedTemplateError) as exc_info:
            word_filler.fill(b"PK\x03\x04 this is not really a zip", {"a": "1"})
        assert exc_info.value.code == "UNSUPPORTED_TEMPLATE"


class TestPlaceholderNames:
    def test_text_body(self):
        assert placeholder_names(b"{{b}} {{a}} {{b}}") == ["b", "a"]

    def test_package_scans_textual_parts_only(self, make_xlsx):
        # logo.png also contains {{company_name}} but is not a textual part
        names = placeholder_names(make_xlsx("{{claim_id}}", "{{ claim_id }} {{amount}}"))
        assert names == ["claim_id", "amount"]
