from scorecard.modules.kpi_scanner import detect_area, kpi_id, scan_kpi_rows


def _row(area, weight, name, op=">=", param=0.1):
    return [None, area, weight, name, op, param, None, None]


def _sheet(*rows):
    return [["RESTAURANTES"], [None] * 8, [None] * 8] + list(rows)


def test_area_cursor_persists_until_next_area():
    matrix = _sheet(
        _row("ECONÓMICO", 0.5, "CRECIMIENTO VENTAS", ">"),
        _row(None, 0.5, "MARGEN"),
        _row("Servicio", 1, "NPS", "<="),
        _row(None, 0.2, "QUEJAS", "<"),
    )

    rows = scan_kpi_rows(matrix).rows

    assert [(r.area_id, r.name) for r in rows] == [
        ("ECONOMICO", "CRECIMIENTO VENTAS"),
        ("ECONOMICO", "MARGEN"),
        ("SERVICIO", "NPS"),
        ("SERVICIO", "QUEJAS"),
    ]
    assert [r.operator for r in rows] == [">", ">=", "<=", "<"]
    assert rows[0].row_idx == 3


def test_rows_before_first_area_are_skipped():
    matrix = _sheet(
        _row(None, 0.5, "HUERFANO"),
        _row("MERCADEO", 1, "SEGUIDORES"),
    )

    scan = scan_kpi_rows(matrix)

    assert [r.name for r in scan.rows] == ["SEGUIDORES"]
    assert any("No area active yet" in line for line in scan.logs)


def test_noise_names_and_bad_weights_are_rejected():
    matrix = _sheet(
        _row("OPERATIVO", 0.4, "COSTO"),
        _row(None, 0.4, "TOTAL OPERATIVO"),
        _row(None, 1, "Peso"),
        _row(None, 0, "SIN PESO"),
        _row(None, 1.2, "PESO EXCESIVO"),
        _row(None, "abc", "PESO TEXTO"),
        _row(None, 0.5, "X"),
        _row(None, 0.5, None),
        _row(None, "60%", "ROTURA"),
    )

    scan = scan_kpi_rows(matrix)

    assert [r.name for r in scan.rows] == ["COSTO", "ROTURA"]
    assert scan.rows[1].weight_in_area == 0.6
    assert sum("Invalid weight" in line for line in scan.logs) == 3
    assert any("structural row \"TOTAL OPERATIVO\"" in line for line in scan.logs)


def test_duplicate_kpis_in_same_area_keep_first():
    matrix = _sheet(
        _row("RRHH", 0.6, "ROTACION"),
        _row(None, 0.3, "rotacion"),
        _row("SERVICIO", 0.3, "Rotacion"),
    )

    rows = scan_kpi_rows(matrix).rows

    assert [(r.area_id, r.weight_in_area) for r in rows] == [("RRHH", 0.6), ("SERVICIO", 0.3)]


def test_short_rows_are_ignored():
    matrix = _sheet([None, "ECONOMICO", 0.5, "CORTA"], _row(None, 0.5, "LARGA"))
    assert scan_kpi_rows(matrix).rows == []


def test_unparseable_param_defaults_to_zero():
    matrix = _sheet(_row("MERCADEO", 1, "SEGUIDORES", ">", "n/a"))
    assert scan_kpi_rows(matrix).rows[0].param == 0.0


def test_detect_area_aliases():
    assert detect_area("ECONOMICO") == "ECONOMICO"
    assert detect_area("económico") == "ECONOMICO"
    assert detect_area("OPERATIVA") == "OPERATIVO"
    assert detect_area("R R H H") == "RRHH"
    assert detect_area("TALENTO HUMANO") == "RRHH"
    assert detect_area("Mercadeo y ventas") == "MERCADEO"
    assert detect_area("AREA") is None
    assert detect_area("") is None


def test_kpi_id_is_prefixed_by_unit_type():
    assert kpi_id("restaurant", "ECONOMICO", "Crecimiento Ventas") == "restaurant_economico_crecimiento_ventas"
    assert kpi_id("disco", "ECONOMICO", "Crecimiento Ventas") == "disco_economico_crecimiento_ventas"


def test_accent_and_punctuation_variants_are_duplicates():
    matrix = _sheet(
        _row("SERVICIO", 0.5, "SATISFACCIÓN"),
        _row(None, 0.5, "SATISFACCION"),
        _row(None, 0.4, "Satisfacción."),
    )

    scan = scan_kpi_rows(matrix)

    assert [r.name for r in scan.rows] == ["SATISFACCIÓN"]
    assert sum("duplicate KPI" in line for line in scan.logs) == 2
    assert len({kpi_id("restaurant", r.area_id, r.name) for r in scan.rows}) == len(scan.rows)
