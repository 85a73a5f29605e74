"""Printable PDF export of a finished scan session."""

import io
import logging
import re
from datetime import datetime
from typing import Optional
from xml.sax.saxutils import escape

from core.image_preprocessor import ImagePreprocessor
from core.session import Session
from core.utils import DISCLAIMER, ProgressCallback

logger = logging.getLogger(__name__)

_BOLD = re.compile(r"\*\*(.+?)\*\*")


def report_markup(text: str) -> str:
    """Convert the model's light markdown into reportlab paragraph markup."""
    escaped = escape(text.strip())
    escaped = _BOLD.sub(r"<b>\1</b>", escaped)
    return escaped.replace("\n", "<br/>")


class ReportGenerator:
    """Generates the exportable report for a session."""

    def generate_pdf(
        self,
        session: Session,
        output_path: str,
        on_progress: Optional[ProgressCallback] = None,
    ) -> bool:
        """Generate a PDF with the report, symptoms, and disclaimer."""
        if not session.llm_report:
            logger.warning("No analysis available, PDF not written")
            return False

        try:
            from reportlab.lib import colors
            from reportlab.lib.pagesizes import A4
            from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
            from reportlab.lib.units import mm
            from reportlab.platypus import (
                Image,
                Paragraph,
                SimpleDocTemplate,
                Spacer,
                Table,
                TableStyle,
            )

            if on_progress:
                on_progress(1, 4, "Creating PDF layout...")

            doc = SimpleDocTemplate(
                output_path,
                pagesize=A4,
                leftMargin=20 * mm,
                rightMargin=20 * mm,
                topMargin=20 * mm,
                bottomMargin=20 * mm,
            )

            styles = getSampleStyleSheet()
            elements = []

            title_style = ParagraphStyle(
                "ReportTitle",
                parent=styles["Title"],
                fontSize=20,
                spaceAfter=6,
            )
            elements.append(Paragraph("DermaVision AI Report", title_style))
            elements.append(Spacer(1, 4 * mm))

            disclaimer_style = ParagraphStyle(
                "Disclaimer",
                parent=styles["Normal"],
                fontSize=9,
                textColor=colors.HexColor("#92400E"),
                backColor=colors.HexColor("#FEF3C7"),
                borderColor=colors.HexColor("#F59E0B"),
                borderWidth=1,
                borderPadding=8,
                spaceBefore=4,
                spaceAfter=8,
            )
            elements.append(Paragraph(f"<b>Disclaimer:</b> {DISCLAIMER}", disclaimer_style))
            elements.append(Spacer(1, 4 * mm))

            meta_style = ParagraphStyle("Meta", parent=styles["Normal"], fontSize=10, textColor=colors.grey)
            timestamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
            elements.append(Paragraph(f"Date: {timestamp}", meta_style))
            symptoms = ", ".join(session.symptoms) or "not provided"
            elements.append(Paragraph(f"Reported symptoms: {escape(symptoms)}", meta_style))
            elements.append(Spacer(1, 6 * mm))

            if on_progress:
                on_progress(2, 4, "Adding image analysis...")

            if session.image_url:
                thumbnail = ImagePreprocessor.create_thumbnail(session.image_url, size=(200, 200))
                elements.append(Image(io.BytesIO(thumbnail), width=120, height=120, kind="proportional"))
                elements.append(Spacer(1, 4 * mm))

            if session.vision_result:
                elements.append(Paragraph("Image Analysis", styles["Heading2"]))
                table_data = [["Label", "Confidence"]]
                for item in session.vision_result.confidences:
                    table_data.append([item.label, f"{item.confidence * 100:.1f}%"])
                if len(table_data) == 1:
                    table_data.append([session.vision_result.label, "-"])

                table = Table(table_data, colWidths=[220, 100])
                table.setStyle(TableStyle([
                    ("BACKGROUND", (0, 0), (-1, 0), colors.HexColor("#0F766E")),
                    ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
                    ("FONTSIZE", (0, 0), (-1, 0), 10),
                    ("FONTSIZE", (0, 1), (-1, -1), 9),
                    ("ALIGN", (1, 0), (-1, -1), "CENTER"),
                    ("GRID", (0, 0), (-1, -1), 0.5, colors.HexColor("#E5E7EB")),
                    ("ROWBACKGROUNDS", (0, 1), (-1, -1), [colors.white, colors.HexColor("#F9FAFB")]),
                    ("TOPPADDING", (0, 0), (-1, -1), 6),
                    ("BOTTOMPADDING", (0, 0), (-1, -1), 6),
                ]))
                elements.append(table)
                elements.append(Spacer(1, 6 * mm))

            if on_progress:
                on_progress(3, 4, "Adding report...")

            elements.append(Paragraph("Final Verdict", styles["Heading2"]))
            elements.append(Paragraph(report_markup(session.llm_report), styles["Normal"]))

            footer_style = ParagraphStyle("Footer", parent=styles["Normal"], fontSize=8, textColor=colors.grey)
            elements.append(Spacer(1, 10 * mm))
            elements.append(Paragraph("Generated by DermaVision AI", footer_style))

            if on_progress:
                on_progress(4, 4, "Writing PDF...")

            doc.build(elements)
            return True

        except Exception:
            logger.exception("PDF export failed")
            return False
