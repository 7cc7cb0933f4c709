"""
Board components.

`post_board` holds the view state and actions; `board_renderer` turns that state
into the view model the templates draw.
"""
