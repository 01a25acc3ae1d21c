import unittest

from coordinates import MAX_ROWS, Coordinate
from viewport import Direction, Viewport


class ViewportMovementTests(unittest.TestCase):
    def setUp(self):
        self.vp = Viewport(24, 80)

    def test_geometry(self):
        self.assertEqual(self.vp.page_height, 21)
        self.assertEqual(self.vp.page_width, 7)
        self.assertEqual(list(self.vp.visible_columns()), list(range(7)))

    def test_cursor_stops_at_edges(self):
        self.assertFalse(self.vp.move_cursor(Direction.UP))
        self.assertFalse(self.vp.move_cursor(Direction.LEFT))
        self.assertEqual(self.vp.cursor, Coordinate(0, 0))

    def test_holding_down_ends_on_last_row(self):
        for _ in range(MAX_ROWS):
            self.vp.move_cursor(Direction.DOWN)
        self.assertEqual(self.vp.cursor.row, 998)
        self.assertEqual(self.vp.top, 978)
        self.assertTrue(self.vp.is_visible(self.vp.cursor))

    def test_moving_right_scrolls_columns(self):
        for _ in range(30):
            self.vp.move_cursor(Direction.RIGHT)
        self.assertEqual(self.vp.cursor.column, 25)
        self.assertEqual(self.vp.left, 19)
        self.assertTrue(self.vp.is_visible(self.vp.cursor))

    def test_resize_keeps_cursor_visible(self):
        for _ in range(20):
            self.vp.move_cursor(Direction.DOWN)
        self.vp.resize(10, 80)
        self.assertTrue(self.vp.is_visible(self.vp.cursor))


class ViewportScrollTests(unittest.TestCase):
    def setUp(self):
        self.vp = Viewport(24, 80)

    def test_scroll_up_at_top_is_refused(self):
        self.assertFalse(self.vp.scroll_up(5))
        self.assertEqual(self.vp.top, 0)

    def test_scroll_down_drags_cursor(self):
        self.assertTrue(self.vp.scroll_down(10))
        self.assertEqual(self.vp.top, 10)
        self.assertEqual(self.vp.cursor.row, 10)

    def test_scroll_up_drags_cursor(self):
        self.vp.move_to(Coordinate(0, 500))
        self.vp.scroll_up(100)
        self.assertTrue(self.vp.is_visible(self.vp.cursor))

    def test_scroll_down_stops_at_last_row(self):
        while self.vp.scroll_down(100):
            pass
        self.assertEqual(self.vp.top, MAX_ROWS - 1)
        self.assertEqual(self.vp.cursor.row, MAX_ROWS - 1)

    def test_half_page(self):
        self.vp.scroll_page(0.5)
        self.assertEqual(self.vp.top, 10)
        self.vp.scroll_page(-0.5)
        self.assertEqual(self.vp.top, 0)


class ViewportJumpTests(unittest.TestCase):
    def test_move_to_recenters(self):
        vp = Viewport(24, 80)
        self.assertTrue(vp.move_to(Coordinate(2, 4)))
        self.assertEqual(vp.cursor, Coordinate(2, 4))
        self.assertTrue(vp.is_visible(vp.cursor))

    def test_move_to_invalid_is_refused(self):
        vp = Viewport(24, 80)
        self.assertFalse(vp.move_to(None))
        self.assertFalse(vp.move_to(Coordinate(26, 0)))
        self.assertEqual(vp.cursor, Coordinate(0, 0))


if __name__ == "__main__":
    unittest.main()
