"""Shared fixtures: small scorecard workbooks built in memory."""

from io import BytesIO
from typing import Dict, List

import pytest
from openpyxl import Workbook

from scorecard.config import Settings
from scorecard.modules.workbook_parser import parse_scorecard_workbook


HEADER = ["PESO AREA", "AREA", "PESO", "INDICADOR", "OPERADOR", "PARAMETRO"]


def build_workbook(sheets: Dict[str, List[list]]) -> bytes:
    """Write {sheet title: rows} into an .xlsx buffer, rows starting at A1."""
    wb = Workbook()
    wb.remove(wb.active)
    for title, rows in sheets.items():
        ws = wb.create_sheet(title)
        for row in rows:
            ws.append(row)
    buf = BytesIO()
    wb.save(buf)
    return buf.getvalue()


@pytest.fixture
def restaurant_rows():
    return [
        ["RESTAURANTES"],
        [None, None, None, None, None, None, "BELISARIO", None, "CABRA ANDALUZ", None, "SUPER 8", None],
        HEADER + ["INDICADOR", "CALIFICACION", "INDICADOR", "CALIFICACIÓN", "INDICADOR", "calificacion"],
        [0.65, "ECONÓMICO", 0.6, "CRECIMIENTO VENTAS", ">", 0.03, 0.05, 0.2, "4%", 0.1, 0.01, 0],
        [None, None, 0.6, "MARGEN EBITDA", ">=", "15%", 0.2, 0.3, None, None, 0.1, 0.15],
        [None, None, None, "TOTAL ECONOMICO", None, None, None, 0.5, None, 0.1, None, 0.15],
        [0.10, "OPERATIVO", 1, "COSTO DE VENTAS", "<=", 0.35, 0.3, 0.1, 0.4, 0, 0.33, 0.1],
        [0.10, "SERVICIO", 1.5, "NPS", ">", 0.8, 0.9, 0.1, 0.7, 0, 0.85, 0.1],
        [None, None, 0.5, "SATISFACCION", ">=", 0.9, "SI", 0.1, "NO", 0, None, None],
        [0.10, "MERCADEO", 1, "SEGUIDORES REDES", ">", 1000, 1200, 0.1, None, None, 900, 0],
        [0.05, "R R H H", 1, "ROTACION", "<", 0.1, 0.05, 0.05, 0.2, 0, 0.08, 0.05],
        [None, None, 0.3, "Rotacion", "<", 0.1, 0.05, 0.05, 0.2, 0, 0.08, 0.05],
    ]


@pytest.fixture
def disco_rows():
    return [
        ["DISCOTECAS"],
        [None, None, None, None, None, None, "LA FABULOSA", None, "100 FUEGOS", None],
        HEADER + ["INDICADOR", "CALIFICACION", "INDICADOR", "CALIFICACION"],
        [0.65, "ECONOMICO", 0.5, "CRECIMIENTO VENTAS", ">", 0.03, 0.1, 0.3, 0.02, 0],
        [None, None, 0.3, "VENTA BARRA", ">", 0.5, 0.6, 0.2, 0.4, 0],
        [0.05, "TALENTO HUMANO", 0.2, "CAPACITACIONES", ">=", 2, 3, 0.05, 1, 0],
    ]


@pytest.fixture
def roi_rows():
    return [
        [None, None, "BELISARIO"],
        [None, None, "INVERSION", 100000],
        [None, None, "TIR", 0.28, "ANUAL"],
        [None, None, "TIR", 0.021, "MENSUAL"],
        [None, None, "ROI", 2.09, "2,60%", "18 MESES"],
        [None],
        [None, None, "SUPER 8 Y CIEN FUEGOS"],
        [None, None, "INVERSION", 250000],
        [None, None, "TIR", 0.015],
        [None, None, "TIR", 0.2],
        [None, None, "ROI", 0.6, None, "Recupera en 24 meses"],
        [None],
        [None],
        [None],
        [None],
        [None, None, "EL MURO"],
        [None, None, "INVERSION", 50000],
        [None, None, "TIR", 0.1, "ANUAL"],
        [None, None, "ROI", 0.3],
    ]


@pytest.fixture
def settings():
    return Settings()


@pytest.fixture
def scorecard_bytes(restaurant_rows, disco_rows, roi_rows):
    return build_workbook({
        "RESTAURANTES": restaurant_rows,
        "DISCOTECAS": disco_rows,
        "ROI   TIR": roi_rows,
    })


@pytest.fixture
def parsed(scorecard_bytes, settings):
    return parse_scorecard_workbook(scorecard_bytes, settings)


@pytest.fixture
def make_workbook():
    return build_workbook
