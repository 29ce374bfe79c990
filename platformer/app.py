"""
Platformer - Main Application (pygame)

Owns the window and the main loop:

    ┌──────────────────────────── frame ────────────────────────────┐
    │ events → input sampling → N fixed physics steps → draw → flip │
    └───────────────────────────────────────────────────────────────┘

Physics runs at GameConfig.physics_step regardless of the frame rate, so
jump heights do not depend on how fast the machine draws.
"""

import pygame
from typing import List, Optional, Set

from .camera import Camera
from .config import GameConfig
from .entities import Body, Player, Walker, default_registry
from .level import LevelLoader, LoadedLevel

PLAYER_COLORS = [(255, 255, 255), (255, 216, 0)]
WALKER_COLOR = (220, 40, 40)
WHITE = (255, 255, 255)

# Longest frame we simulate; anything slower (window drag, debugger) is
# dropped rather than replayed
MAX_FRAME_TIME = 0.25


def pil_to_surface(image) -> pygame.Surface:
    """Convert a PIL RGBA image into a pygame surface"""
    return pygame.image.frombytes(image.tobytes(), image.size, "RGBA")


class PlatformerApp:
    """Main platformer application"""

    def __init__(self, config: Optional[GameConfig] = None):
        self.config = config or GameConfig()

        pygame.init()
        self.screen = pygame.display.set_mode(
            (self.config.screen_width, self.config.screen_height), pygame.RESIZABLE
        )
        pygame.display.set_caption("Platformer")
        self.font = pygame.font.Font(None, 20)
        self.clock = pygame.time.Clock()

        self.loader = LevelLoader(self.config)
        self.registry = default_registry(self.config)
        self.camera = Camera(self.config.screen_width, self.config.screen_height)

        self.current: Optional[LoadedLevel] = None
        self.layer_surfaces: List[pygame.Surface] = []
        self.entities: List[Body] = []
        self.players: List[Player] = []

        self.accumulator = 0.0
        self.running = True

        self.load_level(self.config.starting_level)

        print("\n=== Ready! ===")
        print("Arrows: Player 1 | A/D/W: Player 2")
        print("PgUp/PgDn: Previous/next level | R: Restart | ESC: Quit")

    # =========================================================================
    # LEVELS
    # =========================================================================

    def load_level(self, number: int):
        """Load a level and spawn its entities. Load errors propagate."""
        self.current = self.loader.load_level(number)
        level = self.current.level

        # One pre-scaled surface per visible layer
        zoom = self.camera.zoom
        self.layer_surfaces = []
        for layer in level.map.layers:
            if not layer.visible:
                continue
            surface = pil_to_surface(self.current.renderer.render_layer(layer))
            size = (round(surface.get_width() * zoom), round(surface.get_height() * zoom))
            self.layer_surfaces.append(pygame.transform.scale(surface, size))

        self.entities = self.registry.spawn_all(level)
        self.players = [e for e in self.entities if isinstance(e, Player)]
        if not self.players:
            print(f"Warning: Level {number} has no player spawn point")

        self.camera.set_bounds(level.pixel_width, level.pixel_height)
        self.accumulator = 0.0

    def change_level(self, delta: int):
        number = self.current.number + delta
        if self.loader.level_exists(number):
            self.load_level(number)
        else:
            print(f"No level {number} in {self.config.levels_dir}")

    def restart_level(self):
        self.load_level(self.current.number)

    # =========================================================================
    # INPUT
    # =========================================================================

    def handle_events(self) -> Set[int]:
        """Process the event queue and return the keys pressed this frame"""
        pressed = set()
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.running = False

            elif event.type == pygame.VIDEORESIZE:
                self.screen = pygame.display.set_mode((event.w, event.h), pygame.RESIZABLE)
                self.camera.resize(event.w, event.h)

            elif event.type == pygame.KEYDOWN:
                pressed.add(event.key)
                if event.key == pygame.K_ESCAPE:
                    self.running = False
                elif event.key == pygame.K_r:
                    self.restart_level()
                elif event.key == pygame.K_PAGEDOWN:
                    self.change_level(1)
                elif event.key == pygame.K_PAGEUP:
                    self.change_level(-1)
        return pressed

    def _feed_players(self, pressed: Set[int]):
        keys = pygame.key.get_pressed()
        for player in self.players:
            controls = player.controls
            held = {key for key in (controls.left, controls.right, controls.jump) if keys[key]}
            player.handle_input(held, pressed)

    # =========================================================================
    # SIMULATION
    # =========================================================================

    def update(self, dt: float):
        collision = self.current.level.collision
        for entity in self.entities:
            entity.update(dt, collision)

        walkers = [e for e in self.entities if isinstance(e, Walker)]
        for player in self.players:
            if not player.alive or any(player.overlaps(w) for w in walkers):
                print(f"{player.name} died, restarting level {self.current.number}")
                self.restart_level()
                return

        self.entities = [e for e in self.entities if e.alive]

    # =========================================================================
    # DRAWING
    # =========================================================================

    def draw(self):
        self.screen.fill(self.config.background_color)

        if self.players:
            # Follow the midpoint of all players
            cx = sum(p.x for p in self.players) / len(self.players)
            cy = sum(p.y for p in self.players) / len(self.players)
            self.camera.follow(cx, cy)

        origin = self.camera.world_to_screen(0, 0)
        for surface in self.layer_surfaces:
            self.screen.blit(surface, origin)

        for entity in self.entities:
            self._draw_entity(entity)

        text = self.font.render(f"Level {self.current.number}  FPS {int(self.clock.get_fps())}",
                                True, WHITE)
        self.screen.blit(text, (8, 8))

        pygame.display.flip()

    def _draw_entity(self, entity: Body):
        if isinstance(entity, Player):
            index = self.players.index(entity) % len(PLAYER_COLORS)
            color = PLAYER_COLORS[index]
        else:
            color = WALKER_COLOR

        x, y = self.camera.world_to_screen(entity.left, entity.top)
        zoom = self.camera.zoom
        rect = pygame.Rect(x, y, round(entity.width * zoom), round(entity.height * zoom))
        pygame.draw.rect(self.screen, color, rect)

    # =========================================================================
    # MAIN LOOP
    # =========================================================================

    def run(self):
        step = self.config.physics_step
        while self.running:
            frame_time = min(self.clock.tick(self.config.fps) / 1000.0, MAX_FRAME_TIME)

            pressed = self.handle_events()
            if not self.running:
                break
            self._feed_players(pressed)

            self.accumulator += frame_time
            while self.accumulator >= step:
                self.update(step)
                self.accumulator -= step

            self.draw()

        pygame.quit()
