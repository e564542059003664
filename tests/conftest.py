from datetime import date

import pytest
import shapefile

# Rings in a y-up frame: outer boundaries clockwise, holes counter-clockwise.
CW_A = [(0.0, 0.0), (0.0, 10.0), (10.0, 10.0), (10.0, 0.0), (0.0, 0.0)]
CCW_HOLE = [(2.0, 2.0), (4.0, 2.0), (4.0, 4.0), (2.0, 4.0), (2.0, 2.0)]
CW_B = [(20.0, 0.0), (20.0, 10.0), (30.0, 10.0), (30.0, 0.0), (20.0, 0.0)]

LINE = [(0.1, 0.2), (1.1, 1.2), (2.1, 2.2), (3.1, 3.2)]
MULTI_LINE_PARTS = [
    [(0.0, 0.0), (1.0, 1.0), (2.0, 2.0)],
    [(10.0, 10.0), (11.0, 11.0), (12.0, 12.0), (13.0, 13.0)],
    [(20.0, 20.0), (21.0, 21.0), (22.0, 22.0)],
]


@pytest.fixture
def points_path(tmp_path):
    path = tmp_path / "cities"
    with shapefile.Writer(str(path), shapeType=shapefile.POINT) as w:
        w.field("NAME", "C", size=20)
        w.field("POP", "N", size=10)
        w.field("CAPITAL", "L")
        w.field("FOUNDED", "D")
        w.point(-3.5, 53.5)
        w.record("A", None, True, date(1850, 4, 1))
        w.point(1.25, -2.75)
        w.record("B", 42, False, None)
        w.point(100.0, 0.5)
        w.record("C", 7, None, date(2001, 12, 31))
    return path.with_suffix(".shp")


@pytest.fixture
def lines_path(tmp_path):
    path = tmp_path / "roads"
    with shapefile.Writer(str(path), shapeType=shapefile.POLYLINE) as w:
        w.field("ROAD", "C", size=10)
        w.line([LINE])
        w.record("single")
        w.line(MULTI_LINE_PARTS)
        w.record("multi")
    return path.with_suffix(".shp")


@pytest.fixture
def lines_z_path(tmp_path):
    path = tmp_path / "pipes"
    with shapefile.Writer(str(path), shapeType=shapefile.POLYLINEZ) as w:
        w.field("PIPE", "C", size=10)
        w.linez([[(x, y, -10.0 * i) for i, (x, y) in enumerate(LINE)]])
        w.record("single")
        w.linez([[(x, y, 5.0) for x, y in part] for part in MULTI_LINE_PARTS])
        w.record("multi")
    return path.with_suffix(".shp")


@pytest.fixture
def polygons_path(tmp_path):
    path = tmp_path / "parcels"
    with shapefile.Writer(str(path), shapeType=shapefile.POLYGON) as w:
        w.field("PARCEL", "N", size=5)
        w.poly([CW_A, CCW_HOLE, CW_B])
        w.record(1)
        w.poly([CW_A])
        w.record(2)
    return path.with_suffix(".shp")


@pytest.fixture
def multipoints_path(tmp_path):
    path = tmp_path / "wells"
    with shapefile.Writer(str(path), shapeType=shapefile.MULTIPOINT) as w:
        w.field("FIELD", "C", size=10)
        w.multipoint([(1.0, 2.0), (3.0, 4.0), (5.0, 6.0)])
        w.record("north")
    return path.with_suffix(".shp")


@pytest.fixture
def latin1_path(tmp_path):
    path = tmp_path / "towns"
    with shapefile.Writer(str(path), shapeType=shapefile.POINT, encoding="latin-1") as w:
        w.field("NAME", "C", size=20)
        w.field("CODE", "C", size=5)
        w.point(8.5, 47.4)
        w.record("Zürich", "ZH")
    return path.with_suffix(".shp")


@pytest.fixture
def pointz_path(tmp_path):
    path = tmp_path / "soundings"
    with shapefile.Writer(str(path), shapeType=shapefile.POINTZ) as w:
        w.field("ID", "N", size=5)
        w.pointz(1.0, 2.0, -30.0)
        w.record(1)
    return path.with_suffix(".shp")


@pytest.fixture
def short_dbf_path(tmp_path):
    """Two shapes in the .shp, but only one row in the .dbf."""
    path = tmp_path / "roads"
    with shapefile.Writer(str(path), shapeType=shapefile.POLYLINE) as w:
        w.field("ROAD", "C", size=10)
        w.line([LINE])
        w.record("first")
        w.line(MULTI_LINE_PARTS)
        w.record("second")
    single = tmp_path / "single"
    with shapefile.Writer(str(single), shapeType=shapefile.POLYLINE) as w:
        w.field("ROAD", "C", size=10)
        w.line([LINE])
        w.record("first")
    path.with_suffix(".dbf").write_bytes(single.with_suffix(".dbf").read_bytes())
    return path.with_suffix(".shp")


@pytest.fixture
def bad_values_path(tmp_path):
    """A bad date value and a field name that is not valid UTF-8."""
    path = tmp_path / "surveys"
    with shapefile.Writer(str(path), shapeType=shapefile.POINT, encoding="latin-1") as w:
        w.field("NAME", "C", size=10)
        w.field("WHEN", "D")
        w.field("HÖHE", "N", size=6)
        w.point(1.0, 2.0)
        w.record("A", "20201399", 512)
        w.point(3.0, 4.0)
        w.record("B", "20200229", 8)
    return path.with_suffix(".shp")
