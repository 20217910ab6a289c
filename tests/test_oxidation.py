import unittest

from chembalance.elements import PeriodicTable
from chembalance.oxidation import (
    Known,
    Resolved,
    assign_oxidation_numbers,
    assign_oxidation_states,
    classify,
)
from chembalance.parser import parse_compound, parse_equation


def ox(formula, elements=None):
    return assign_oxidation_numbers(parse_compound(formula), elements)


class TestOxidationNumbers(unittest.TestCase):
    def test_elemental_and_monatomic(self):
        self.assertEqual(ox("O2"), {"O": 0})
        self.assertEqual(ox("Fe"), {"Fe": 0})
        self.assertEqual(ox("Cu^2+"), {"Cu": 2})
        self.assertEqual(ox("Cl-"), {"Cl": -1})

    def test_fixed_rules(self):
        self.assertEqual(ox("H2O"), {"H": 1, "O": -2})
        self.assertEqual(ox("NaCl"), {"Na": 1, "Cl": -1})
        self.assertEqual(ox("CaF2"), {"Ca": 2, "F": -1})
        self.assertEqual(ox("NH4+"), {"N": -3, "H": 1})

    def test_metal_hydride(self):
        self.assertEqual(ox("NaH"), {"Na": 1, "H": -1})

    def test_single_unknown_is_resolved_from_charge(self):
        self.assertEqual(ox("Fe2O3")["Fe"], 3)
        self.assertEqual(ox("MnO4-")["Mn"], 7)
        self.assertEqual(ox("Cr2O7^2-")["Cr"], 6)
        self.assertEqual(ox("SO4^2-")["S"], 6)
        self.assertEqual(ox("H2SO4")["S"], 6)
        self.assertEqual(ox("ClO3-")["Cl"], 5)

    def test_peroxide(self):
        self.assertEqual(ox("H2O2"), {"H": 1, "O": -1})
        self.assertEqual(ox("Na2O2"), {"Na": 1, "O": -1})

    def test_several_unknowns_fall_back_to_zero(self):
        self.assertEqual(ox("CuSO4"), {"Cu": 0, "S": 0, "O": -2})

    def test_state_kinds(self):
        states = assign_oxidation_states(parse_compound("Fe2O3"))
        self.assertEqual(states["O"], Known(-2))
        self.assertEqual(states["Fe"], Resolved(3))

    def test_repeated_assignment_is_identical(self):
        compound = parse_compound("K2Cr2O7")
        self.assertEqual(assign_oxidation_numbers(compound), assign_oxidation_numbers(compound))

    def test_injected_table(self):
        table = PeriodicTable(
            atomic_weights={"Xx": 100.0, "O": 15.999},
            fixed_oxidation_states={"Xx": 4},
        )
        self.assertEqual(ox("XxO", table), {"Xx": 4, "O": -2})
        self.assertEqual(ox("XxO"), {"Xx": 2, "O": -2})


class TestClassification(unittest.TestCase):
    def test_single_displacement(self):
        result = classify(parse_equation("Zn + Cu^2+ -> Zn^2+ + Cu"))
        self.assertTrue(result.is_redox)
        self.assertEqual(result.oxidized, ("Zn",))
        self.assertEqual(result.reduced, ("Cu",))
        self.assertEqual(result.before["Cu"], 2)
        self.assertEqual(result.after["Zn"], 2)

    def test_neutralization_is_not_redox(self):
        result = classify(parse_equation("NaOH + HCl -> NaCl + H2O"))
        self.assertFalse(result.is_redox)

    def test_disproportionation(self):
        result = classify(parse_equation("Cl2 + OH- -> Cl- + ClO3- + H2O"))
        self.assertTrue(result.is_disproportionation)
        self.assertTrue(result.has_both_halves)


if __name__ == '__main__':
    unittest.main()
