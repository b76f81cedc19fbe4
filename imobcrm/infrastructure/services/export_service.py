"""
SERVIÇO DE EXPORTAÇÃO
======================

Gera os arquivos para download:
- CSV (.csv) - Imóveis importados, campos entre aspas
- PDF (.pdf) - Tabela paisagem dos imóveis importados
- PDF (.pdf) - Termo de empréstimo de chave
"""

import io
import csv
from xml.sax.saxutils import escape
from datetime import datetime
from typing import Iterable, List, Optional

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4, landscape
from reportlab.lib.styles import getSampleStyleSheet, ParagraphStyle
from reportlab.lib.units import cm, mm
from reportlab.platypus import SimpleDocTemplate, Paragraph, Spacer, Table, TableStyle
from reportlab.lib.enums import TA_CENTER

from imobcrm.domain.entities import ImovelImportado
from imobcrm.domain.entities.imovel_importado import IMPORTED_COLUMNS
from imobcrm.domain.services.key_custody import KeyListing


# ============================================
# CONSTANTES
# ============================================

HEADER_BLUE = colors.Color(30 / 255, 58 / 255, 138 / 255)

CSV_MEDIA_TYPE = "text/csv; charset=utf-8"
PDF_MEDIA_TYPE = "application/pdf"


def export_filename(extension: str, selected: bool, when: Optional[datetime] = None) -> str:
    """imoveis_importados_selecionados_2026-10-19.csv"""
    when = when or datetime.now()
    scope = "selecionados" if selected else "filtrados"
    return f"imoveis_importados_{scope}_{when.strftime('%Y-%m-%d')}.{extension}"


def _cell(value) -> str:
    return "" if value is None else str(value)


def _row_values(row: ImovelImportado) -> List[str]:
    return [_cell(getattr(row, attr)) for attr in IMPORTED_COLUMNS]


# ============================================
# EXPORTAÇÃO CSV
# ============================================

def export_imported_to_csv(rows: Iterable[ImovelImportado]) -> bytes:
    """
    Exporta imóveis importados para CSV.

    - Separador: vírgula
    - Todos os campos entre aspas
    - Encoding: UTF-8 com BOM

    Returns:
        bytes do arquivo CSV
    """
    buffer = io.StringIO()
    writer = csv.writer(buffer, delimiter=',', quotechar='"', quoting=csv.QUOTE_ALL, lineterminator="\n")

    writer.writerow(list(IMPORTED_COLUMNS.values()))
    for row in rows:
        writer.writerow(_row_values(row))

    return buffer.getvalue().encode('utf-8-sig')  # BOM para Excel reconhecer UTF-8


# ============================================
# EXPORTAÇÃO PDF
# ============================================

def export_imported_to_pdf(rows: Iterable[ImovelImportado], selected: bool) -> bytes:
    """
    Exporta imóveis importados para PDF (A4 paisagem).

    Cada página recebe o título do relatório e o número da página.

    Returns:
        bytes do arquivo PDF
    """
    buffer = io.BytesIO()
    page_size = landscape(A4)

    doc = SimpleDocTemplate(
        buffer,
        pagesize=page_size,
        rightMargin=5*mm,
        leftMargin=5*mm,
        topMargin=10*mm,
        bottomMargin=10*mm,
    )

    styles = getSampleStyleSheet()
    cell_style = ParagraphStyle('Cell', parent=styles['Normal'], fontSize=6, leading=7)
    head_style = ParagraphStyle('Head', parent=cell_style, textColor=colors.white, fontName='Helvetica-Bold')

    title = f"Relatório de Imóveis Importados ({'Selecionados' if selected else 'Completo'})"

    def draw_page(canvas, document):
        canvas.saveState()
        canvas.setFont('Helvetica', 10)
        canvas.drawString(document.leftMargin, page_size[1] - 5*mm, title)
        canvas.drawRightString(
            page_size[0] - document.rightMargin,
            page_size[1] - 5*mm,
            f"Página {document.page}",
        )
        canvas.restoreState()

    data = [[Paragraph(label, head_style) for label in IMPORTED_COLUMNS.values()]]
    for row in rows:
        data.append([Paragraph(escape(value), cell_style) for value in _row_values(row)])

    table = Table(data, repeatRows=1)
    table.setStyle(TableStyle([
        ('BACKGROUND', (0, 0), (-1, 0), HEADER_BLUE),
        ('GRID', (0, 0), (-1, -1), 0.25, colors.HexColor('#BDBDBD')),
        ('VALIGN', (0, 0), (-1, -1), 'TOP'),
        ('LEFTPADDING', (0, 0), (-1, -1), 1),
        ('RIGHTPADDING', (0, 0), (-1, -1), 1),
        ('TOPPADDING', (0, 0), (-1, -1), 1),
        ('BOTTOMPADDING', (0, 0), (-1, -1), 1),
    ]))

    doc.build([table], onFirstPage=draw_page, onLaterPages=draw_page)
    return buffer.getvalue()


def export_key_receipt_pdf(key: KeyListing, agency_name: Optional[str] = None) -> bytes:
    """
    Gera o termo de empréstimo de chave.

    Returns:
        bytes do arquivo PDF
    """
    buffer = io.BytesIO()

    doc = SimpleDocTemplate(
        buffer,
        pagesize=A4,
        rightMargin=2*cm,
        leftMargin=2*cm,
        topMargin=2*cm,
        bottomMargin=2*cm
    )

    styles = getSampleStyleSheet()

    title_style = ParagraphStyle(
        'ReceiptTitle',
        parent=styles['Heading1'],
        fontSize=18,
        alignment=TA_CENTER,
        spaceAfter=20,
    )

    story = [
        Paragraph("Termo de Empréstimo de Chaves", title_style),
        Spacer(1, 0.5*cm),
    ]

    details = [
        ["Chave", key.codigo_chave],
        ["Agência", key.agencia or agency_name or "-"],
        ["Imóvel", key.imovel_label],
        ["Retirada por", key.retirada_por or "-"],
        ["Tipo de retirada", key.tipo_retirada or "-"],
        ["Motivo", key.motivo or "-"],
        ["Previsão de entrega", key.previsao_display],
    ]

    table = Table(details, colWidths=[5*cm, 11*cm])
    table.setStyle(TableStyle([
        ('FONTNAME', (0, 0), (0, -1), 'Helvetica-Bold'),
        ('BACKGROUND', (0, 0), (0, -1), colors.HexColor('#F5F5F5')),
        ('GRID', (0, 0), (-1, -1), 0.5, colors.HexColor('#E0E0E0')),
        ('VALIGN', (0, 0), (-1, -1), 'MIDDLE'),
        ('TOPPADDING', (0, 0), (-1, -1), 6),
        ('BOTTOMPADDING', (0, 0), (-1, -1), 6),
    ]))
    story.append(table)
    story.append(Spacer(1, 1*cm))

    story.append(Paragraph(
        "Declaro ter recebido a chave acima identificada e me comprometo a "
        "devolvê-la até a data e hora previstas.",
        styles['Normal'],
    ))
    story.append(Spacer(1, 2.5*cm))
    story.append(Paragraph("_" * 60, styles['Normal']))
    story.append(Paragraph(escape(key.retirada_por or ""), styles['Normal']))
    story.append(Spacer(1, 0.5*cm))
    story.append(Paragraph(
        f"Emitido em {datetime.now().strftime('%d/%m/%Y às %H:%M')}",
        styles['Italic'],
    ))

    doc.build(story)
    return buffer.getvalue()
