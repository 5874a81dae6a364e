import pygame
from dataclasses import dataclass
from typing import Tuple, Optional, List
from aquarium_model import AquariumModel, FLOODED, INVALID
import grid_style

@dataclass
class Camera:
    offset_x: float = 0.0
    offset_y: float = 0.0

    def world_to_screen(self, wx: float, wy: float) -> Tuple[float, float]:
        return wx + self.offset_x, wy + self.offset_y

def _blit_centered(screen: pygame.Surface, surf: pygame.Surface, rect: pygame.Rect) -> None:
    screen.blit(
        surf,
        (rect.x + (rect.width - surf.get_width()) // 2, rect.y + (rect.height - surf.get_height()) // 2)
    )

def board_pixel_size(model: AquariumModel, base_cell_size: int) -> Tuple[int, int]:
    """Size of a board including one cell of hints on every side."""
    return (model.width + 2) * base_cell_size, (model.height + 2) * base_cell_size

def draw_grid(
    screen: pygame.Surface,
    model: AquariumModel,
    camera: Camera,
    base_cell_size: int,
    font: pygame.font.Font,
    small_font: pygame.font.Font,
    show_partitions: bool = False,
    affected_cells: Optional[List[Tuple[int, int]]] = None
) -> None:
    """Draw the board with hints (top/left) and remainders (bottom/right).

    The camera offset is the top-left corner of the hint frame; cells start
    one cell further in.
    """
    if model.width == 0 or model.height == 0:
        return

    thickness = grid_style.WALL_THICKNESS

    def cell_rect(x: int, y: int) -> pygame.Rect:
        sx, sy = camera.world_to_screen((x + 1) * base_cell_size, (y + 1) * base_cell_size)
        return pygame.Rect(int(sx), int(sy), base_cell_size, base_cell_size)

    for y in range(model.height):
        for x in range(model.width):
            rect = cell_rect(x, y)
            state = model.state_at(x, y)
            if state == FLOODED:
                pygame.draw.rect(screen, grid_style.COLOR_FLOODED, rect)
            elif state == INVALID:
                pygame.draw.rect(screen, grid_style.COLOR_INVALID, rect)
                pygame.draw.line(screen, grid_style.COLOR_INVALID_MARK, rect.topleft, rect.bottomright, 2)
                pygame.draw.line(screen, grid_style.COLOR_INVALID_MARK, rect.topright, rect.bottomleft, 2)
            else:
                pygame.draw.rect(screen, grid_style.COLOR_EMPTY, rect)

            pygame.draw.rect(screen, grid_style.COLOR_GRID_LINES, rect, 1)

            if affected_cells and (x, y) in affected_cells:
                pygame.draw.rect(screen, grid_style.COLOR_SOLVER_HIGHLIGHT, rect, 3)

            if show_partitions:
                surf = small_font.render(str(model.partition_at(x, y)), True, grid_style.COLOR_TEXT_DEBUG)
                screen.blit(surf, (rect.x + 3, rect.y + 2))

    # Walls and floors between partitions
    for y in range(model.height):
        for x in range(model.width):
            rect = cell_rect(x, y)
            if x + 1 < model.width and model.has_wall(x, y):
                pygame.draw.line(screen, grid_style.COLOR_WALLS, rect.topright, rect.bottomright, thickness)
            if y + 1 < model.height and model.has_floor(x, y):
                pygame.draw.line(screen, grid_style.COLOR_WALLS, rect.bottomleft, rect.bottomright, thickness)

    top_left = cell_rect(0, 0)
    outline = pygame.Rect(top_left.x, top_left.y, base_cell_size * model.width, base_cell_size * model.height)
    pygame.draw.rect(screen, grid_style.COLOR_WALLS, outline, thickness)

    # Hints and remainders
    for x in range(model.width):
        _blit_centered(screen, font.render(str(model.col_hints[x]), True, grid_style.COLOR_TEXT_HINT), cell_rect(x, -1))
        _blit_centered(screen, small_font.render(str(model.col_remainder(x)), True, grid_style.COLOR_TEXT_HINT), cell_rect(x, model.height))
    for y in range(model.height):
        _blit_centered(screen, font.render(str(model.row_hints[y]), True, grid_style.COLOR_TEXT_HINT), cell_rect(-1, y))
        _blit_centered(screen, small_font.render(str(model.row_remainder(y)), True, grid_style.COLOR_TEXT_HINT), cell_rect(model.width, y))

def _fonts(base_cell_size: int) -> Tuple[pygame.font.Font, pygame.font.Font]:
    pygame.font.init()
    return pygame.font.Font(None, int(base_cell_size * 0.75)), pygame.font.Font(None, int(base_cell_size * 0.45))

def render_board_image(
    model: AquariumModel,
    path: str,
    base_cell_size: int = grid_style.BASE_CELL_SIZE,
    show_partitions: bool = False
) -> pygame.Surface:
    """Draw a single board to a new surface and save it to path."""
    font, small_font = _fonts(base_cell_size)
    board_w, board_h = board_pixel_size(model, base_cell_size)
    surface = pygame.Surface((board_w + 2 * grid_style.PADDING, board_h + 2 * grid_style.PADDING))
    surface.fill(grid_style.COLOR_BG)

    camera = Camera(offset_x=grid_style.PADDING, offset_y=grid_style.PADDING)
    draw_grid(surface, model, camera, base_cell_size, font, small_font, show_partitions=show_partitions)

    pygame.image.save(surface, path)
    return surface

def render_comparison(
    before: AquariumModel,
    after: AquariumModel,
    path: str,
    title: str = "After",
    affected_cells: Optional[List[Tuple[int, int]]] = None,
    base_cell_size: int = grid_style.BASE_CELL_SIZE,
    show_partitions: bool = False
) -> pygame.Surface:
    """Side-by-side 'before' and 'after' boards, changed cells outlined."""
    font, small_font = _fonts(base_cell_size)
    board_w, board_h = board_pixel_size(before, base_cell_size)
    padding = grid_style.PADDING
    img_width = 2 * board_w + 3 * padding
    img_height = board_h + padding + grid_style.TITLE_HEIGHT

    surface = pygame.Surface((img_width, img_height))
    surface.fill(grid_style.COLOR_BG)

    camera_before = Camera(offset_x=padding, offset_y=grid_style.TITLE_HEIGHT)
    draw_grid(surface, before, camera_before, base_cell_size, font, small_font, show_partitions=show_partitions)
    surface.blit(font.render("Before", True, grid_style.COLOR_TITLE), (padding, 5))

    camera_after = Camera(offset_x=board_w + 2 * padding, offset_y=grid_style.TITLE_HEIGHT)
    draw_grid(surface, after, camera_after, base_cell_size, font, small_font,
              show_partitions=show_partitions, affected_cells=affected_cells)
    title_short = title[:40] + '...' if len(title) > 40 else title
    surface.blit(font.render(title_short, True, grid_style.COLOR_TITLE), (board_w + 2 * padding, 5))

    pygame.image.save(surface, path)
    return surface
