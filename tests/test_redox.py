import unittest

from chembalance.constants import ACIDIC, BASIC
from chembalance.errors import RedoxDecompositionError
from chembalance.oxidation import classify
from chembalance.parser import parse_compound, parse_equation
from chembalance.redox import (
    HYDROXIDE,
    PROTON,
    WATER,
    HalfReaction,
    balance_charge,
    balance_half,
    balance_hydrogen,
    balance_oxygen,
    balance_redox,
    decompose,
    detect_medium,
    identify_key,
)


class TestHalfReactionStages(unittest.TestCase):
    def setUp(self):
        self.dichromate = HalfReaction(parse_compound("Cr2O7^2-"), parse_compound("Cr^3+"))

    def test_identify_key_scales_counts(self):
        half, step = identify_key(self.dichromate, ACIDIC)
        self.assertEqual(half.key_element, "Cr")
        self.assertEqual((half.reactant_count, half.product_count), (1, 2))
        self.assertEqual(step, "Balance Cr: Cr2O7^2- -> 2 Cr^3+")

    def test_identify_key_without_change(self):
        half, step = identify_key(HalfReaction(parse_compound("Zn"), parse_compound("Zn^2+")), ACIDIC)
        self.assertEqual(half.key_element, "Zn")
        self.assertIsNone(step)

    def test_stages_do_not_mutate_their_input(self):
        half, _ = identify_key(self.dichromate, ACIDIC)
        balanced, _ = balance_oxygen(half, ACIDIC)
        self.assertEqual(half.right_extras, ())
        self.assertEqual(balanced.right_extras, ((WATER, 7),))

    def test_acidic_pipeline(self):
        half, _ = identify_key(self.dichromate, ACIDIC)
        half, _ = balance_oxygen(half, ACIDIC)
        half, step = balance_hydrogen(half, ACIDIC)
        self.assertEqual(half.left_extras, ((PROTON, 14),))
        self.assertTrue(step.startswith("Balance H with H+"))
        half, step = balance_charge(half, ACIDIC)
        self.assertEqual(half.electron_count, 6)
        self.assertTrue(half.electrons_on_left)
        self.assertEqual(str(half), "Cr2O7^2- + 14 H+ + 6e- -> 2 Cr^3+ + 7 H2O")

    def test_basic_hydrogen_balance(self):
        half = HalfReaction(parse_compound("MnO4-"), parse_compound("MnO2"))
        half, steps = balance_half(half, BASIC)
        self.assertEqual(half.left_extras, ((WATER, 4),))
        self.assertEqual(half.right_extras, ((WATER, 2), (HYDROXIDE, 4)))
        self.assertEqual(half.electron_count, 3)
        self.assertTrue(half.electrons_on_left)
        self.assertEqual(steps[0], "Half-reaction: MnO4- -> MnO2")
        self.assertIn("Balance H in basic solution (H2O/OH-): MnO4- + 4 H2O -> MnO2 + 2 H2O + 4 OH-", steps)

    def test_oxidation_half_releases_electrons(self):
        half, _ = balance_half(HalfReaction(parse_compound("Fe^2+"), parse_compound("Fe^3+")), ACIDIC)
        self.assertEqual(half.electron_count, 1)
        self.assertFalse(half.electrons_on_left)
        self.assertEqual(str(half), "Fe^2+ -> Fe^3+ + 1e-")


class TestMedium(unittest.TestCase):
    def test_detection(self):
        self.assertEqual(detect_medium(parse_equation("Zn + Cu^2+ -> Zn^2+ + Cu")), ACIDIC)
        self.assertEqual(detect_medium(parse_equation("Cl2 + OH- -> Cl- + ClO3- + H2O")), BASIC)
        self.assertEqual(detect_medium(parse_equation("NaOH + HCl -> NaCl + H2O")), BASIC)
        self.assertEqual(detect_medium(parse_equation("CaO + H2O -> Ca(OH)2")), BASIC)
        self.assertEqual(detect_medium(parse_equation("CH3OH + O2 -> CO2 + H2O")), ACIDIC)


class TestRedoxEngine(unittest.TestCase):
    def balance(self, text):
        equation = parse_equation(text)
        return balance_redox(equation, classify(equation))

    def test_single_displacement(self):
        outcome = self.balance("Zn + Cu^2+ -> Zn^2+ + Cu")
        self.assertEqual(outcome.equation, "Zn + Cu^2+ -> Zn^2+ + Cu")
        self.assertEqual([h.electron_count for h in outcome.halves], [2, 2])
        self.assertEqual(outcome.steps[-1], "Balanced Equation: Zn + Cu^2+ -> Zn^2+ + Cu")
        self.assertNotIn("Multiply", " ".join(outcome.steps))

    def test_unequal_electron_counts(self):
        outcome = self.balance("Fe^2+ + MnO4- + H+ -> Fe^3+ + Mn^2+ + H2O")
        self.assertEqual(outcome.equation, "5 Fe^2+ + MnO4- + 8 H+ -> 5 Fe^3+ + Mn^2+ + 4 H2O")
        self.assertIn("Multiply half-reactions to equalize electrons: oxidation x5, reduction x1", outcome.steps)
        self.assertEqual(outcome.medium, ACIDIC)

    def test_water_from_elements(self):
        outcome = self.balance("H2 + O2 -> H2O")
        self.assertEqual(outcome.equation, "2 H2 + O2 -> 2 H2O")

    def test_disproportionation_in_base(self):
        outcome = self.balance("Cl2 + OH- -> Cl- + ClO3- + H2O")
        self.assertEqual(outcome.medium, BASIC)
        self.assertEqual(outcome.equation, "3 Cl2 + 6 OH- -> ClO3- + 3 H2O + 5 Cl-")
        self.assertEqual(outcome.halves[0].product.label, "ClO3-")
        self.assertEqual(outcome.halves[1].product.label, "Cl-")

    def test_decompose_pairs_changed_species(self):
        equation = parse_equation("Zn + Cu^2+ -> Zn^2+ + Cu")
        halves = decompose(equation, classify(equation))
        self.assertEqual([(h.reactant.label, h.product.label) for h in halves], [("Zn", "Zn^2+"), ("Cu^2+", "Cu")])

    def test_decompose_skips_products_where_element_is_unchanged(self):
        equation = parse_equation("KMnO4 + HCl -> KCl + MnCl2 + Cl2 + H2O")
        halves = decompose(equation, classify(equation))
        self.assertEqual(
            [(h.reactant.label, h.product.label) for h in halves],
            [("HCl", "Cl2"), ("KMnO4", "MnCl2")],
        )

    def test_unclean_decomposition_raises(self):
        with self.assertRaises(RedoxDecompositionError) as ctx:
            self.balance("Fe + O2 -> Fe2O3")
        self.assertTrue(ctx.exception.steps)
        self.assertEqual(ctx.exception.steps[0], "Half-reaction: Fe -> Fe2O3")

    def test_every_written_species_must_survive(self):
        with self.assertRaises(RedoxDecompositionError) as ctx:
            self.balance("H2 + O2 -> H2O + H2O2")
        self.assertIn("H2O2", str(ctx.exception))
        self.assertTrue(ctx.exception.steps)


if __name__ == '__main__':
    unittest.main()
