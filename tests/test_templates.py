import unittest

from seating_chart.errors import InvalidDimensions, MalformedEditorInput
from seating_chart.log import logger
from seating_chart.schemas import LayoutType, SectionType
from seating_chart.templates import (
    TEMPLATES,
    VenueType,
    coerce_capacity_hint,
    generate_sections,
    venue_profile,
)


def _seats(section):
    return sum(len(r.seats) for r in section.rows)


class TestGenerateSections(unittest.TestCase):
    def test_theater(self):
        sections = generate_sections("theater", 800)
        self.assertEqual([s.name for s in sections], ["Orchestra", "Mezzanine", "Balcony"])
        orchestra, mezzanine, balcony = sections

        self.assertEqual(len(orchestra.rows), 15)
        self.assertEqual(orchestra.seats_per_row, 30)
        self.assertEqual(_seats(orchestra), 450)
        self.assertEqual(orchestra.section_type, SectionType.standard)
        self.assertEqual(orchestra.pricing, "premium")

        self.assertEqual(mezzanine.section_type, SectionType.curved)
        self.assertEqual(_seats(mezzanine), 200)
        self.assertEqual(mezzanine.curve_radius, 150)
        self.assertEqual(mezzanine.rows[0].curve.radius, 100)
        self.assertEqual(mezzanine.rows[1].curve.radius, 115)

        self.assertEqual(balcony.section_type, SectionType.curved)
        self.assertEqual(_seats(balcony), 100)
        self.assertEqual(balcony.pricing, "economy")
        self.assertEqual(balcony.curve_angle, 45)
        self.assertEqual((balcony.rows[0].curve.start_angle, balcony.rows[0].curve.end_angle), (-30, 30))

    def test_unknown_venue_type_falls_back_to_generic(self):
        messages = []
        handler_id = logger.add(messages.append, level="INFO", format="{message}")
        try:
            sections = generate_sections("unknown-value")
        finally:
            logger.remove(handler_id)

        self.assertEqual(len(sections), 1)
        main = sections[0]
        self.assertEqual(main.name, "Main Section")
        self.assertEqual(len(main.rows), 20)
        self.assertEqual(main.seats_per_row, 25)
        self.assertEqual(_seats(main), 500)
        self.assertEqual(main.section_type, SectionType.standard)
        self.assertTrue(any("unknown-value" in m for m in messages))

    def test_missing_venue_type_falls_back_to_generic(self):
        self.assertEqual([s.name for s in generate_sections(None)], ["Main Section"])

    def test_venue_type_match_is_exact(self):
        self.assertEqual([s.name for s in generate_sections("Arena")], ["Main Section"])
        self.assertEqual([s.name for s in generate_sections(" arena")], ["Main Section"])
        self.assertEqual(len(generate_sections("arena")), 3)
        self.assertEqual(len(generate_sections(VenueType.club)), 2)

    def test_archetype_capacities(self):
        expected = {"theater": 750, "arena": 650, "stadium": 4250, "club": 332, "generic": 500}
        for vt, capacity in expected.items():
            with self.subTest(venue_type=vt):
                self.assertEqual(sum(_seats(s) for s in generate_sections(vt)), capacity)

    def test_every_archetype_has_a_template(self):
        self.assertEqual(set(TEMPLATES), set(VenueType))

    def test_curvature_invariant_holds_for_all_templates(self):
        for vt in VenueType:
            for section in generate_sections(vt):
                every_row_curved = all(r.curve is not None for r in section.rows)
                self.assertEqual(section.section_type == SectionType.curved, every_row_curved)

    def test_seat_ids_unique_across_sections(self):
        for vt in VenueType:
            ids = [seat.id for s in generate_sections(vt) for r in s.rows for seat in r.seats]
            self.assertEqual(len(ids), len(set(ids)))

    def test_arena_rotation(self):
        rotations = {s.id: s.rotation for s in generate_sections("arena")}
        self.assertEqual(rotations, {"floor": 0, "lower-left": -30, "lower-right": 30})

    def test_bad_capacity_hint(self):
        for bad in ["lots", -5, float("nan"), True, [100]]:
            with self.subTest(bad=bad):
                with self.assertRaises(InvalidDimensions):
                    generate_sections("theater", bad)


class TestCapacityHint(unittest.TestCase):
    def test_coerce(self):
        self.assertIsNone(coerce_capacity_hint(None))
        self.assertEqual(coerce_capacity_hint(1200), 1200)
        self.assertEqual(coerce_capacity_hint("1200"), 1200)
        self.assertEqual(coerce_capacity_hint(99.9), 99)


class TestVenueProfile(unittest.TestCase):
    def test_club(self):
        p = venue_profile("Blue Room", "club", 1000)
        self.assertTrue(p.description.startswith("Blue Room is an intimate club venue"))
        self.assertEqual(p.parking_capacity, 200)
        self.assertEqual([s.name for s in p.suggested_layouts], ["Standing Room", "VIP Tables"])
        self.assertEqual(p.suggested_layouts[0].type, LayoutType.general_admission)
        self.assertEqual(p.suggested_layouts[0].capacity, 1000)

    def test_arena(self):
        p = venue_profile("Dome", "arena", 1000)
        self.assertEqual(p.parking_capacity, 500)
        self.assertIn("VIP Lounge", p.amenities)

    def test_unknown_type_is_general(self):
        p = venue_profile("Hall", "warehouse", 200)
        self.assertEqual([s.name for s in p.suggested_layouts], ["General Layout"])
        self.assertEqual(p.suggested_layouts[0].capacity, 200)

    def test_name_required(self):
        with self.assertRaises(MalformedEditorInput):
            venue_profile("  ", "theater", 100)


if __name__ == "__main__":
    unittest.main()
