import tempfile
import unittest
from pathlib import Path

from cmm_qc.ingest.readers_cmm import CmmTextReader, parse_line, parse_measurement_text, sanitize_type_tag
from cmm_qc.models.points import DataPoint


class TestLineParser(unittest.TestCase):
    def test_circle_line_full_layout(self):
        pts = parse_measurement_text("5;CIRCLE;1.0;2.0;3.0;0;0;0;sample;12.345;0.05")
        self.assertEqual(len(pts), 1)
        self.assertEqual(
            pts[0],
            DataPoint(
                index=5, type_tag="CIRCLE",
                x=1.0, y=2.0, z=3.0,
                rot_x=0.0, rot_y=0.0, rot_z=0.0,
                note="sample", diameter=12.345, tolerance=0.05,
            ),
        )

    def test_pt_comp_line(self):
        (p,) = parse_measurement_text("7;PT-COMP;1.5;2.5;3.5")
        self.assertEqual(p, DataPoint(index=7, type_tag="PT-COMP", x=1.5, y=2.5, z=3.5))
        self.assertIsNone(p.diameter)
        self.assertIsNone(p.rot_x)
        self.assertEqual(p.note, "")

    def test_two_field_line_dropped(self):
        self.assertEqual(parse_measurement_text("1;X"), ())

    def test_distance_layout_one_column_earlier(self):
        p = parse_line("1;DISTANCE;15.9;0.2;a;b;c;d;4.5")
        # column 1 holds the tag itself, so x never resolves
        self.assertIsNone(p.x)
        self.assertEqual(p.y, 15.9)
        self.assertEqual(p.z, 0.2)
        self.assertEqual(p.diameter, 4.5)
        self.assertIsNone(p.tolerance)

    def test_plane_and_circle_variants_share_layout(self):
        plane = parse_line("3;PLANE;1;2;3;4;5;6;n;7;8")
        circle = parse_line("3;CIRCLE-IN;1;2;3;4;5;6;n;7;8")
        self.assertEqual(plane.diameter, 7.0)
        self.assertEqual(circle.diameter, 7.0)
        self.assertEqual(circle.type_tag, "CIRCLE-IN")

    def test_unknown_tag_keeps_record_without_values(self):
        p = parse_line("3;ANGLE;1;2;3")
        self.assertEqual(p, DataPoint(index=3, type_tag="ANGLE"))

    def test_unparsable_fields_become_none(self):
        p = parse_line("5;CIRCLE;abc;2.0;;0;0;0;note;-;nan")
        self.assertIsNone(p.x)
        self.assertEqual(p.y, 2.0)
        self.assertIsNone(p.z)
        self.assertIsNone(p.diameter)
        self.assertIsNone(p.tolerance)

    def test_short_circle_line_partial_record(self):
        p = parse_line("5;CIRCLE;1.0")
        self.assertEqual(p.x, 1.0)
        self.assertIsNone(p.y)
        self.assertEqual(p.note, "")

    def test_bad_index_is_malformed(self):
        self.assertIsNone(parse_line("x;CIRCLE;1.0"))
        self.assertEqual(parse_line("5.0;PT-COMP;1;2;3").index, 5)

    def test_type_tag_sanitized(self):
        self.assertEqual(sanitize_type_tag("  PT-COMP* "), "PT-COMP")
        self.assertEqual(sanitize_type_tag('"CIRCLE"'), "CIRCLE")
        self.assertEqual(parse_line("9; CIRCLE.;0;0;0;0;0;0;n;37.5;0").type_tag, "CIRCLE")

    def test_order_duplicates_and_blank_lines_kept(self):
        text = "\r\n".join([
            "9;CIRCLE;0;0;0;0;0;0;a;1.0;0",
            "",
            "   ",
            "2;PT-COMP;1;2;3",
            "9;CIRCLE;0;0;0;0;0;0;b;2.0;0",
            "9;PLANE;0;0;0;0;0;0;c;3.0;0",
        ])
        pts = parse_measurement_text(text)
        self.assertEqual([(p.index, p.type_tag) for p in pts],
                         [(9, "CIRCLE"), (2, "PT-COMP"), (9, "CIRCLE"), (9, "PLANE")])
        self.assertEqual([p.note for p in pts], ["a", "", "b", "c"])


class TestCmmTextReader(unittest.TestCase):
    def test_read_counts_and_warnings(self):
        with tempfile.TemporaryDirectory() as d:
            p = Path(d) / "part_001.txt"
            p.write_text("1;X\n7;PT-COMP;1.5;2.5;3.5\n\n3;ANGLE;1\n", encoding="utf-8")
            mf = CmmTextReader().read(p)
            self.assertEqual(mf.file_id, "part_001")
            self.assertEqual(mf.n_lines, 3)
            self.assertEqual(mf.n_points, 2)
            self.assertEqual(mf.n_skipped, 1)
            self.assertEqual(len(mf.warnings), 2)
            self.assertIn("Skipped 1 malformed line(s): 1", mf.warnings[0])
            self.assertIn("ANGLE", mf.warnings[1])

    def test_read_tolerates_bom(self):
        with tempfile.TemporaryDirectory() as d:
            p = Path(d) / "bom.txt"
            p.write_bytes("\ufeff7;PT-COMP;1.5;2.5;3.5\n".encode("utf-8"))
            mf = CmmTextReader().read(p)
            self.assertEqual(mf.points[0].index, 7)

    def test_read_missing_file_raises(self):
        with tempfile.TemporaryDirectory() as d:
            with self.assertRaises(FileNotFoundError):
                CmmTextReader().read(Path(d) / "nope.txt")

    def test_read_many_drops_empty_files(self):
        with tempfile.TemporaryDirectory() as d:
            good = Path(d) / "good.txt"
            empty = Path(d) / "empty.txt"
            good.write_text("7;PT-COMP;1.5;2.5;3.5\n", encoding="utf-8")
            empty.write_text("1;X\n\n", encoding="utf-8")
            files, warnings = CmmTextReader().read_many([good, empty])
            self.assertEqual([f.file_id for f in files], ["good"])
            self.assertEqual(len(warnings), 1)
            self.assertIn("empty.txt", warnings[0])


if __name__ == "__main__":
    unittest.main()
