import unittest

from scheduler import ElevatorSnapshot, ScoreWeights, WeightedScoreScheduler, get_scheduler


def view(elevator_id, floor, direction=0, targets=(), load=0):
    return ElevatorSnapshot(
        elevator_id=elevator_id,
        current_floor=floor,
        direction=direction,
        targets=tuple(targets),
        load=load,
    )


class WeightedScoreSchedulerTest(unittest.TestCase):
    def setUp(self):
        self.scheduler = WeightedScoreScheduler()

    def test_closer_idle_car_wins(self):
        elevators = [view(0, 0), view(1, 5)]
        self.assertEqual(self.scheduler.select_best_elevator(elevators, 6, 1), 1)

    def test_car_already_heading_there_wins_tie(self):
        elevators = [view(0, 3, direction=1, targets=[8]), view(1, 5)]
        self.assertEqual(self.scheduler.score(elevators[0], 4, 1), self.scheduler.score(elevators[1], 4, 1))
        self.assertEqual(self.scheduler.select_best_elevator(elevators, 4, 1), 0)

    def test_direction_scores(self):
        self.assertEqual(self.scheduler._direction_score(view(0, 3), 5, 1), 2)
        self.assertEqual(self.scheduler._direction_score(view(0, 3, direction=1), 5, 1), 3)
        self.assertEqual(self.scheduler._direction_score(view(0, 3, direction=1), 2, 1), -3)
        self.assertEqual(self.scheduler._direction_score(view(0, 3, direction=1), 3, 1), -3)
        self.assertEqual(self.scheduler._direction_score(view(0, 3, direction=-1), 1, -1), 3)
        self.assertEqual(self.scheduler._direction_score(view(0, 3, direction=-1), 5, 1), -5)

    def test_load_penalizes_passengers_and_stops(self):
        busy = view(0, 4, load=3, targets=[1, 7])
        self.assertEqual(self.scheduler.score(busy, 4, 1), -3 - 2 + 2)

    def test_ties_keep_lowest_index(self):
        elevators = [view(0, 2), view(1, 6), view(2, 2)]
        self.assertEqual(self.scheduler.select_best_elevator(elevators, 4, 1), 0)

    def test_selection_is_deterministic(self):
        elevators = [view(0, 9, direction=-1, targets=[0], load=4), view(1, 1, direction=1, targets=[5]), view(2, 6)]
        first = self.scheduler.select_best_elevator(elevators, 3, 1)
        second = self.scheduler.select_best_elevator(elevators, 3, 1)
        self.assertEqual(first, second)

    def test_empty_bank_is_an_error(self):
        with self.assertRaises(ValueError):
            self.scheduler.select_best_elevator([], 3, 1)

    def test_weights_can_be_overridden(self):
        scheduler = WeightedScoreScheduler(idle=10)
        self.assertEqual(scheduler.weights, ScoreWeights(idle=10))
        elevators = [view(0, 3, direction=1, targets=[8]), view(1, 5)]
        self.assertEqual(scheduler.select_best_elevator(elevators, 4, 1), 1)

    def test_unknown_weight_is_rejected(self):
        with self.assertRaises(ValueError):
            WeightedScoreScheduler(speed=4)


class RegistryTest(unittest.TestCase):
    def test_lookup_is_case_insensitive(self):
        self.assertIsInstance(get_scheduler("Weighted"), WeightedScoreScheduler)

    def test_unknown_scheduler(self):
        with self.assertRaises(ValueError):
            get_scheduler("round_robin")


if __name__ == "__main__":
    unittest.main()
