import unittest

from cargo import BulkCargo, BulkCargoType, Container, ContainerType
from errors import NoSuchCargoError
from quay import BulkQuay, ContainerQuay
from ship_manager import BulkCarrier, ContainerShip, NauticalFlag


class TestCargo(unittest.TestCase):
    def test_rejects_negative_id_and_tonnage(self):
        with self.assertRaises(ValueError):
            Container(-1, "AU", ContainerType.STANDARD)
        with self.assertRaises(ValueError):
            BulkCargo(3, "AU", -5, BulkCargoType.COAL)

    def test_rejects_fractional_values(self):
        with self.assertRaises(ValueError):
            Container(1.5, "AU", ContainerType.STANDARD)
        with self.assertRaises(ValueError):
            BulkCargo(3, "AU", 10.2, BulkCargoType.COAL)
        with self.assertRaises(ValueError):
            BulkCargo(3, "AU", True, BulkCargoType.COAL)

    def test_types_accept_enum_or_name(self):
        self.assertIs(BulkCargo(1, "AU", 10, "OIL").type, BulkCargoType.OIL)
        self.assertIs(Container(2, "AU", "REEFER").type, ContainerType.REEFER)
        with self.assertRaises(ValueError):
            Container(3, "AU", "SUBMARINE")


class TestShips(unittest.TestCase):
    def test_imo_number_must_have_seven_digits(self):
        for bad in (123456, 12345678, -1234567, 0):
            with self.assertRaises(ValueError):
                BulkCarrier(bad, "Bad", "AU", NauticalFlag.NOVEMBER, 100)
        ship = BulkCarrier(1000000, "Ok", "AU", NauticalFlag.NOVEMBER, 100)
        self.assertEqual(ship.imo_number, 1000000)

    def test_fractional_imo_number_is_not_truncated(self):
        for bad in (1234567.9, 1234567.0, "1234567"):
            with self.assertRaises(ValueError, msg=repr(bad)):
                BulkCarrier(bad, "Bad", "AU", NauticalFlag.NOVEMBER, 100)
        with self.assertRaises(ValueError):
            ContainerShip(1234567, "Bad", "AU", NauticalFlag.NOVEMBER, 10.5)

    def test_rejects_negative_capacity(self):
        with self.assertRaises(ValueError):
            ContainerShip(1234567, "Bad", "AU", NauticalFlag.NOVEMBER, -1)

    def test_can_dock_matches_quay_kind_and_size(self):
        carrier = BulkCarrier(1234567, "Coal", "AU", NauticalFlag.NOVEMBER, 120)
        boxship = ContainerShip(7654321, "Box", "AU", NauticalFlag.NOVEMBER, 30)

        self.assertTrue(carrier.can_dock(BulkQuay(0, 120)))
        self.assertFalse(carrier.can_dock(BulkQuay(1, 119)))
        self.assertFalse(carrier.can_dock(ContainerQuay(2, 1000)))

        self.assertTrue(boxship.can_dock(ContainerQuay(3, 30)))
        self.assertFalse(boxship.can_dock(ContainerQuay(4, 29)))
        self.assertFalse(boxship.can_dock(BulkQuay(5, 1000)))

    def test_bulk_carrier_loading_rules(self):
        carrier = BulkCarrier(1234567, "Coal", "AU", NauticalFlag.NOVEMBER, 120)
        fits = BulkCargo(1, "AU", 120, BulkCargoType.COAL)

        self.assertFalse(carrier.can_load(BulkCargo(2, "AU", 121, BulkCargoType.COAL)))
        self.assertFalse(carrier.can_load(BulkCargo(3, "NZ", 50, BulkCargoType.COAL)))
        self.assertFalse(carrier.can_load(Container(4, "AU", ContainerType.STANDARD)))
        self.assertTrue(carrier.can_load(fits))

        carrier.load_cargo(fits)
        self.assertEqual(carrier.cargo(), [fits])
        # Single slot hold: a second load is refused
        self.assertFalse(carrier.can_load(BulkCargo(5, "AU", 10, BulkCargoType.GRAIN)))
        with self.assertRaises(ValueError):
            carrier.load_cargo(BulkCargo(6, "AU", 10, BulkCargoType.GRAIN))

    def test_container_ship_respects_slot_count(self):
        boxship = ContainerShip(7654321, "Box", "AU", NauticalFlag.NOVEMBER, 2)
        boxes = [Container(i, "AU", ContainerType.STANDARD) for i in range(3)]

        boxship.load_cargo(boxes[0])
        boxship.load_cargo(boxes[1])
        self.assertFalse(boxship.can_load(boxes[2]))
        self.assertEqual(len(boxship.cargo()), 2)

    def test_unloading_empty_hold_is_an_error(self):
        carrier = BulkCarrier(1234567, "Coal", "AU", NauticalFlag.NOVEMBER, 120)
        boxship = ContainerShip(7654321, "Box", "AU", NauticalFlag.NOVEMBER, 10)
        with self.assertRaises(NoSuchCargoError):
            carrier.unload_cargo()
        with self.assertRaises(NoSuchCargoError):
            boxship.unload_cargo()

    def test_unload_clears_hold(self):
        boxship = ContainerShip(7654321, "Box", "AU", NauticalFlag.NOVEMBER, 10)
        boxes = [Container(i, "AU", ContainerType.STANDARD) for i in range(3)]
        for box in boxes:
            boxship.load_cargo(box)

        self.assertEqual(boxship.unload_cargo(), boxes)
        self.assertFalse(boxship.has_cargo())
        self.assertEqual(boxship.cargo(), [])


class TestQuays(unittest.TestCase):
    def test_rejects_invalid_construction(self):
        with self.assertRaises(ValueError):
            BulkQuay(-1, 100)
        with self.assertRaises(ValueError):
            BulkQuay(0, -100)
        with self.assertRaises(ValueError):
            ContainerQuay(0, -1)
        with self.assertRaises(ValueError):
            BulkQuay(0.5, 100)
        with self.assertRaises(ValueError):
            ContainerQuay(0, 12.5)

    def test_arrive_and_depart(self):
        quay = BulkQuay(0, 200)
        ship = BulkCarrier(1234567, "Coal", "AU", NauticalFlag.NOVEMBER, 120)
        self.assertTrue(quay.is_empty())

        quay.ship_arrives(ship)
        self.assertFalse(quay.is_empty())
        self.assertIs(quay.ship, ship)

        self.assertIs(quay.ship_departs(), ship)
        self.assertTrue(quay.is_empty())
        self.assertIsNone(quay.ship_departs())

    def test_double_docking_is_refused(self):
        quay = BulkQuay(0, 200)
        quay.ship_arrives(BulkCarrier(1234567, "A", "AU", NauticalFlag.NOVEMBER, 120))
        with self.assertRaises(RuntimeError):
            quay.ship_arrives(BulkCarrier(2345678, "B", "AU", NauticalFlag.NOVEMBER, 120))


if __name__ == "__main__":
    unittest.main()
