import unittest
from dataclasses import replace

from falling_blocks.game import (
    INITIAL_STATE,
    AddShape,
    CheckLevelUp,
    EndGame,
    GameConfig,
    GameCycle,
    Move,
    NextLevel,
    RestartGame,
    Rotate,
    Score,
    Stats,
    Tick,
    apply_action,
    create_shape,
    initial_state,
    reduce_actions,
    render_blocks_from_shape,
    scan_states,
)

from .helpers import all_fixed_cells, make_shape, make_state, obstacles_at


class TestInitialState(unittest.TestCase):
    def test_given_default_config_when_starting_then_empty_board_and_preview_shape(self):
        s = INITIAL_STATE
        self.assertFalse(s.game_end)
        self.assertFalse(s.level_up)
        self.assertIsNone(s.current_shape)
        self.assertEqual(s.fixed_shapes, ())
        self.assertEqual(s.obstacles, ())
        self.assertEqual(s.stats, Stats(level=1, score=0, high_score=0))
        self.assertEqual(s.drop_rate, 20)
        self.assertEqual((s.next_shape.id, s.next_shape.x, s.next_shape.y), ("shape1", 40, 0))
        self.assertEqual(s.next_shape.type, create_shape((0, 0)).type)
        self.assertEqual(initial_state(), INITIAL_STATE)

    def test_given_config_when_starting_then_drop_rate_is_block_height(self):
        s = initial_state(GameConfig(canvas_width=300, canvas_height=600))
        self.assertEqual(s.drop_rate, 30)
        self.assertEqual(s.next_shape.block_width, 30)


class TestMoveAndRotate(unittest.TestCase):
    def test_given_no_current_shape_when_moving_or_rotating_then_state_unchanged(self):
        s = make_state()
        self.assertIs(apply_action(s, Move(20, 0)), s)
        self.assertIs(apply_action(s, Move(0, 20)), s)
        self.assertIs(apply_action(s, Rotate()), s)

    def test_given_shape_when_moving_then_translated(self):
        s = make_state(make_shape("T", 60, 0))
        s2 = apply_action(s, Move(-20, 0))
        self.assertEqual(s2.current_shape.x, 40)
        self.assertEqual(s2.current_shape.blocks[0].x, 40)
        self.assertEqual(s.current_shape.x, 60)

    def test_given_shape_at_wall_when_moving_into_wall_then_state_unchanged(self):
        s = make_state(make_shape("T", 0, 0))
        self.assertIs(apply_action(s, Move(-20, 0)), s)

    def test_given_shape_above_floor_when_moving_down_then_settles(self):
        shape = make_shape("O", 0, 320)
        s = apply_action(make_state(shape), Move(0, 20))
        self.assertIsNone(s.current_shape)
        self.assertEqual(len(s.fixed_shapes), 1)
        self.assertTrue(s.fixed_shapes[0].fix)
        self.assertEqual(s.fixed_shapes[0].y, 340)

    def test_given_game_end_when_moving_then_state_unchanged(self):
        s = make_state(make_shape("O", 60, 0), game_end=True)
        self.assertIs(apply_action(s, Move(0, 20)), s)

    def test_given_shape_when_rotating_then_angle_advances_and_wraps(self):
        s = make_state(make_shape("T", 60, 100, angle=270))
        s2 = apply_action(s, Rotate())
        self.assertEqual(s2.current_shape.angle, 0)
        s3 = apply_action(s2, Rotate())
        self.assertEqual(s3.current_shape.angle, 90)

    def test_given_vertical_i_at_left_wall_when_rotating_then_kicked_inside(self):
        s = make_state(make_shape("I", -40, 100))
        s2 = apply_action(s, Rotate())
        shape = s2.current_shape
        self.assertEqual((shape.angle, shape.x), (90, 0))
        self.assertEqual(sorted(b.x for b in shape.blocks), [0, 20, 40, 60])
        self.assertTrue(all(b.y == 140 for b in shape.blocks))

    def test_given_blocked_rotation_when_rotating_then_state_unchanged(self):
        # horizontal I would cover (60, 140)
        s = make_state(make_shape("I", 60, 100), fixed=obstacles_at([(60, 140)]))
        self.assertIs(apply_action(s, Rotate()), s)


class TestScore(unittest.TestCase):
    def test_given_full_bottom_row_when_scoring_then_row_cleared_and_blocks_shift(self):
        bottom = [(x, 380) for x in range(0, 200, 20)]
        above = [(0, 360), (40, 300)]
        fixed = obstacles_at(bottom + above)
        s = make_state(fixed=fixed, obstacles=fixed, stats=Stats(level=2, score=3))
        s2 = apply_action(s, Score())
        self.assertEqual(s2.stats.score, 5)
        self.assertEqual(len(all_fixed_cells(s2)), len(all_fixed_cells(s)) - 10)
        self.assertEqual(sorted(all_fixed_cells(s2)), [(0, 380), (40, 320)])
        self.assertEqual(len(s2.fixed_shapes), len(s.fixed_shapes))

    def test_given_cleared_row_when_scoring_then_blocks_below_unaffected(self):
        row17 = [(x, 340) for x in range(0, 200, 20)]
        fixed = obstacles_at(row17 + [(0, 360), (20, 380), (60, 320)])
        s2 = apply_action(make_state(fixed=fixed), Score())
        self.assertEqual(sorted(all_fixed_cells(s2)), [(0, 360), (20, 380), (60, 340)])
        self.assertEqual(s2.stats.score, 1)

    def test_given_two_full_rows_when_scoring_then_shift_by_both(self):
        rows = [(x, y) for y in (360, 380) for x in range(0, 200, 20)]
        fixed = obstacles_at(rows + [(100, 340)])
        s2 = apply_action(make_state(fixed=fixed, stats=Stats(level=3)), Score())
        self.assertEqual(all_fixed_cells(s2), [(100, 380)])
        self.assertEqual(s2.stats.score, 6)

    def test_given_no_full_rows_when_scoring_then_state_unchanged(self):
        s = make_state(fixed=obstacles_at([(0, 380)]))
        self.assertIs(apply_action(s, Score()), s)

    def test_given_obstacles_when_rows_cleared_then_obstacles_still_subset_of_fixed(self):
        bottom = [(x, 380) for x in range(0, 200, 20)]
        fixed = obstacles_at(bottom + [(60, 300)])
        s2 = apply_action(make_state(fixed=fixed, obstacles=fixed[-2:]), Score())
        for o in s2.obstacles:
            self.assertIn(o, s2.fixed_shapes)
        self.assertEqual([(b.x, b.y) for b in s2.obstacles[-1].blocks], [(60, 320)])


class TestLevels(unittest.TestCase):
    def test_given_scores_and_levels_when_checking_then_threshold_inclusive(self):
        for level in range(1, 6):
            for score in range(0, 60):
                s = apply_action(make_state(stats=Stats(level=level, score=score)), CheckLevelUp())
                self.assertEqual(s.level_up, score >= level * 10, (level, score))

    def test_given_level_up_when_next_level_then_board_reset_with_obstacle(self):
        old = obstacles_at([(0, 260)])
        fixed = old + (replace(make_shape("O", 60, 300), fix=True),)
        s = make_state(
            make_shape("T", 60, 20),
            fixed=fixed,
            obstacles=old,
            stats=Stats(level=2, score=21, high_score=7),
            level_up=True,
        )
        s2 = apply_action(s, NextLevel((0, 0)))
        self.assertEqual(s2.stats, Stats(level=3, score=21, high_score=7))
        self.assertFalse(s2.level_up)
        self.assertIsNone(s2.current_shape)
        self.assertEqual(len(s2.obstacles), 2)
        self.assertEqual(s2.fixed_shapes, s2.obstacles)
        new = s2.obstacles[-1]
        self.assertEqual((new.id, new.x, new.y), ("shape-2", 100, 300))
        self.assertTrue(new.fix)
        self.assertEqual(s2.next_shape, INITIAL_STATE.next_shape)

    def test_given_occupied_pick_when_placing_obstacle_then_next_free_cell(self):
        old = obstacles_at([(100, 300)])
        s = make_state(fixed=old, obstacles=old, stats=Stats(level=1, score=10), level_up=True)
        s2 = apply_action(s, NextLevel((0, 0)))
        self.assertEqual((s2.obstacles[-1].x, s2.obstacles[-1].y), (120, 300))
        cells = all_fixed_cells(s2)
        self.assertEqual(len(cells), len(set(cells)))

    def test_given_random_pairs_when_placing_obstacles_then_lower_half(self):
        s = make_state(stats=Stats(level=1, score=10), level_up=True)
        for pair in [(-1, -1), (1, 1), (0.3, -0.9), (-0.4, 0.99)]:
            o = apply_action(s, NextLevel(pair)).obstacles[-1]
            self.assertTrue(0 <= o.x <= 180)
            self.assertTrue(200 <= o.y <= 380)

    def test_given_no_level_up_when_next_level_then_state_unchanged(self):
        s = make_state()
        self.assertIs(apply_action(s, NextLevel((0, 0))), s)

    def test_given_cleared_obstacle_when_next_level_then_restored_and_count_matches_level(self):
        row = [(x, 380) for x in range(0, 200, 20)]
        fixed = obstacles_at(row)
        s = make_state(fixed=fixed, obstacles=fixed[:1], stats=Stats(level=2, score=15))
        cleared = apply_action(s, Score())
        self.assertEqual(cleared.obstacles[0].blocks, ())
        s2 = apply_action(replace(cleared, level_up=True), NextLevel((0, 0)))
        self.assertEqual(s2.stats.level, 3)
        self.assertEqual(len(s2.obstacles), 2)
        self.assertEqual([o.id for o in s2.obstacles], ["shape-1", "shape-2"])
        self.assertEqual([(b.x, b.y) for b in s2.obstacles[0].blocks], [(0, 380)])

    def test_given_shifted_obstacle_when_next_level_then_back_at_original_cell(self):
        bottom = [(x, 380) for x in range(0, 200, 20)]
        fixed = obstacles_at(bottom + [(60, 300)])
        s = make_state(fixed=fixed, obstacles=fixed[-1:], stats=Stats(level=1, score=0))
        shifted = apply_action(s, Score())
        self.assertEqual([(b.x, b.y) for b in shifted.obstacles[0].blocks], [(60, 320)])
        s2 = apply_action(replace(shifted, level_up=True), NextLevel((0, 0)))
        self.assertEqual(len(s2.obstacles), 2)
        self.assertEqual([(b.x, b.y) for b in s2.obstacles[0].blocks], [(60, 300)])
        self.assertEqual(s2.fixed_shapes, s2.obstacles)


class TestEndAndRestart(unittest.TestCase):
    def test_given_blocked_spawn_when_ticking_then_game_end(self):
        spawned = make_shape("T", 60, 0)
        s = make_state(spawned, fixed=obstacles_at([(80, 60)]))
        s2 = apply_action(s, Tick())
        self.assertTrue(s2.game_end)
        self.assertEqual(s2.current_shape, spawned)

    def test_given_free_spawn_when_ticking_then_shape_drops(self):
        s2 = apply_action(make_state(make_shape("T", 60, 0)), Tick())
        self.assertFalse(s2.game_end)
        self.assertEqual(s2.current_shape.y, 20)

    def test_given_shape_below_spawn_row_when_checking_end_then_not_ended(self):
        s = apply_action(make_state(make_shape("T", 60, 20)), EndGame())
        self.assertFalse(s.game_end)

    def test_given_no_current_shape_when_checking_end_then_unchanged(self):
        s = make_state()
        self.assertIs(apply_action(s, EndGame()), s)

    def test_given_game_end_or_level_up_when_ticking_then_no_op(self):
        for flags in ({"game_end": True}, {"level_up": True}):
            s = make_state(make_shape("T", 60, 0), **flags)
            self.assertIs(apply_action(s, Tick()), s)

    def test_given_game_end_when_cycling_then_restart_keeps_high_score(self):
        s = make_state(
            make_shape("T", 60, 0),
            fixed=obstacles_at([(0, 380)]),
            stats=Stats(level=3, score=25, high_score=10),
            game_end=True,
        )
        s2 = apply_action(s, GameCycle((0.5, 0.5)))
        self.assertEqual(s2, replace(INITIAL_STATE, stats=Stats(level=1, score=0, high_score=25)))

    def test_given_lower_score_when_restarting_then_previous_high_score_kept(self):
        s = make_state(stats=Stats(level=1, score=4, high_score=10), game_end=True)
        self.assertEqual(apply_action(s, RestartGame()).stats.high_score, 10)

    def test_given_running_game_when_restarting_then_unchanged(self):
        s = make_state()
        self.assertIs(apply_action(s, RestartGame()), s)


class TestGameCycle(unittest.TestCase):
    def test_given_running_game_when_cycling_then_next_shape_spawned(self):
        s2 = apply_action(INITIAL_STATE, GameCycle((1, -1)))
        cur, nxt = s2.current_shape, s2.next_shape
        self.assertEqual((cur.id, cur.x, cur.y), ("shape1", 60, 0))
        self.assertEqual(cur.type, INITIAL_STATE.next_shape.type)
        self.assertEqual(cur.blocks, render_blocks_from_shape(cur))
        self.assertEqual((nxt.id, nxt.x, nxt.y, nxt.type.name, nxt.angle), ("shape2", 40, 0, "T", 0))

    def test_given_obstacles_when_adding_shape_then_ids_skip_obstacles(self):
        fixed = obstacles_at([(0, 380), (20, 380)]) + (replace(make_shape("O", 60, 320, number=2), fix=True),)
        s = make_state(fixed=fixed, obstacles=fixed[:2], next_shape=replace(INITIAL_STATE.next_shape, id="shape3"))
        s2 = apply_action(s, AddShape((0, 0)))
        self.assertEqual(s2.current_shape.id, "shape3")
        self.assertEqual(s2.next_shape.id, "shape4")

    def test_given_level_up_and_game_end_when_cycling_then_level_up_wins(self):
        s = make_state(stats=Stats(level=1, score=12), level_up=True, game_end=True)
        s2 = apply_action(s, GameCycle((0, 0)))
        self.assertEqual(s2.stats.level, 2)
        self.assertEqual(s2.stats.score, 12)
        self.assertEqual(len(s2.obstacles), 1)


class TestFold(unittest.TestCase):
    def test_given_actions_when_folding_then_scan_ends_at_fold(self):
        actions = [GameCycle((0, 0)), Tick(), Move(20, 0), Rotate(), Tick(), Tick()]
        states = list(scan_states(actions))
        self.assertEqual(len(states), len(actions))
        self.assertEqual(states[-1], reduce_actions(actions))
        self.assertEqual(states[1].current_shape.y, 20)

    def test_given_unknown_action_when_applying_then_type_error(self):
        with self.assertRaises(TypeError):
            apply_action(INITIAL_STATE, "tick")


if __name__ == "__main__":
    unittest.main()
