"""
flappy_client.py

Desktop client: pygame window, input mapping and drawing around the
simulation. Everything here only reads the simulation, except for the
press/release/start/restart calls made on input.
"""

import logging
import math
import random
import threading
from typing import List, Optional

import pygame

from .constants import (
    CHARACTERS, DAY_MODE, DEFAULT_CHARACTER, FPS, LEADERBOARD_LIMIT, NAME_MAX_LENGTH,
    NIGHT_MODE, REFERENCE_RATE
)
from .data_models import GameState, ScoreEntry, WorldBounds
from .errors import PersistenceError
from .events import EventDispatcher
from .game_loop import LoopDriver
from .leaderboard import normalize_name, qualifies
from .particles import ParticleSystem
from .physics_engine import GameEngine, Simulation
from .reporter import OutcomeReporter

logger = logging.getLogger(__name__)

WHITE = (255, 255, 255)
BLACK = (0, 0, 0)

# 8-bit palette, day and night
THEMES = {
    DAY_MODE: {
        "sky": (78, 192, 202),
        "cloud": (255, 255, 255),
        "ground": (140, 196, 83),
        "grass": (162, 214, 91),
        "dirt": (222, 216, 149),
        "pipe": (116, 191, 46),
        "pipe_border": (85, 128, 34),
    },
    NIGHT_MODE: {
        "sky": (27, 39, 53),
        "cloud": (60, 72, 90),
        "ground": (26, 64, 32),
        "grass": (40, 90, 45),
        "dirt": (90, 84, 60),
        "pipe": (46, 110, 30),
        "pipe_border": (25, 60, 15),
    },
}

CHARACTER_COLORS = {
    "taz": (139, 90, 43),
    "chloe": (240, 240, 240),
}

FLAP_KEYS = (pygame.K_SPACE, pygame.K_UP)
CONFIRM_KEYS = (pygame.K_RETURN, pygame.K_KP_ENTER)


class FlappyClient:
    def __init__(self, reporter: OutcomeReporter, leaderboard=None, audio=None,
                 name: str = "", character: str = DEFAULT_CHARACTER,
                 night: bool = False, seed: Optional[int] = None):
        pygame.init()
        self.bounds = WorldBounds()
        self.screen = pygame.display.set_mode(
            (int(self.bounds.screen_width), int(self.bounds.screen_height)))
        pygame.display.set_caption("FLATTENHUND")

        # --- Game Logic ---
        self.engine = GameEngine(bounds=self.bounds, rng=random.Random(seed))
        self.sim: Simulation = self.engine.create(
            character=character, mode=NIGHT_MODE if night else DAY_MODE)
        self.particles = ParticleSystem()
        self.dispatcher = EventDispatcher(audio=audio, particles=self.particles)
        self.reporter = reporter
        self.leaderboard = leaderboard
        self.driver = LoopDriver(
            self.engine, self.sim,
            render=self._draw_game,
            dispatcher=self.dispatcher,
            reporter=reporter,
            clock=self._clock_seconds,
        )

        # --- Game over state ---
        self.player_name = normalize_name(name) if name else ""
        self.name_entry: Optional[str] = None   # Text being typed, None when hidden
        self.top_scores: List[ScoreEntry] = []
        self.scores_lock = threading.Lock()
        self.reported_run = 0
        self.refresh_timer: Optional[threading.Timer] = None

        self.clock = pygame.time.Clock()
        self.large_font = pygame.font.Font(None, 40)
        self.font = pygame.font.Font(None, 24)
        self._fetch_leaderboard()

    @staticmethod
    def _clock_seconds() -> float:
        return pygame.time.get_ticks() / 1000.0

    # ----------------- Leaderboard -----------------

    def _fetch_leaderboard(self):
        """Refreshes the top scores on a worker thread."""
        if self.leaderboard is None:
            return

        def worker():
            try:
                entries = self.leaderboard.fetch_top_scores(LEADERBOARD_LIMIT)
            except PersistenceError as e:
                logger.warning("Leaderboard fetch failed: %s", e)
                return
            with self.scores_lock:
                self.top_scores = entries

        threading.Thread(target=worker, daemon=True).start()

    def fetch_scores(self) -> List[ScoreEntry]:
        with self.scores_lock:
            return list(self.top_scores)

    def _on_game_over(self):
        outcome = self.reporter.last_outcome
        if outcome is None:
            return
        self.reported_run = outcome.run_id
        if outcome.new_best and qualifies(outcome.score, self.fetch_scores()):
            self.name_entry = self.player_name
            pygame.key.start_text_input()
        self._fetch_leaderboard()

    def _save_name(self):
        name = normalize_name(self.name_entry)
        self.player_name = name
        self.name_entry = None
        pygame.key.stop_text_input()
        if self.reporter.submit_score(name):
            # Give the upload a moment before re-reading the board
            self.refresh_timer = threading.Timer(1.0, self._fetch_leaderboard)
            self.refresh_timer.daemon = True
            self.refresh_timer.start()

    # ----------------- Input -----------------

    def _press(self):
        if self.sim.state is GameState.NOT_STARTED:
            self.driver.start()
        else:
            self.engine.press(self.sim)

    def _restart(self):
        if self.driver.restart():
            self.name_entry = None
            pygame.key.stop_text_input()

    def _handle_event(self, event) -> bool:
        """Maps one pygame event onto the game. Returns False to quit."""
        if event.type == pygame.QUIT:
            return False

        if self.name_entry is not None:
            if event.type == pygame.TEXTINPUT:
                self.name_entry = (self.name_entry + event.text)[:NAME_MAX_LENGTH]
            elif event.type == pygame.KEYDOWN:
                if event.key in CONFIRM_KEYS:
                    self._save_name()
                elif event.key == pygame.K_BACKSPACE:
                    self.name_entry = self.name_entry[:-1]
                elif event.key == pygame.K_ESCAPE:
                    self.name_entry = None
                    pygame.key.stop_text_input()
            return True

        if event.type == pygame.KEYDOWN:
            if event.key == pygame.K_ESCAPE:
                return False
            if event.key in FLAP_KEYS and not getattr(event, "repeat", False):
                self._press()
            elif self.sim.state is GameState.NOT_STARTED:
                self._handle_menu_key(event.key)
            elif self.sim.state is GameState.OVER and event.key in CONFIRM_KEYS + (pygame.K_r,):
                self._restart()
        elif event.type == pygame.KEYUP and event.key in FLAP_KEYS:
            self.engine.release(self.sim)
        elif event.type in (pygame.MOUSEBUTTONDOWN, pygame.FINGERDOWN):
            if self.sim.state is GameState.OVER:
                self._restart()
            else:
                self._press()
        elif event.type in (pygame.MOUSEBUTTONUP, pygame.FINGERUP):
            self.engine.release(self.sim)
        return True

    def _handle_menu_key(self, key):
        if key in (pygame.K_LEFT, pygame.K_RIGHT):
            index = CHARACTERS.index(self.sim.character)
            step = 1 if key == pygame.K_RIGHT else -1
            self.sim.character = CHARACTERS[(index + step) % len(CHARACTERS)]
        elif key == pygame.K_n:
            self.sim.mode = DAY_MODE if self.sim.mode == NIGHT_MODE else NIGHT_MODE

    # ----------------- Main loop -----------------

    def run(self):
        """The main client execution loop."""
        running = True
        while running:
            self.clock.tick(FPS)

            for event in pygame.event.get():
                if not self._handle_event(event):
                    running = False

            if self.driver.active:
                self.driver.tick()
            else:
                self.particles.update(1.0 / FPS)
                self._draw_game(self.sim)

            if self.sim.state is GameState.OVER and self.reported_run != self.sim.run_id:
                self._on_game_over()

        if self.refresh_timer is not None:
            self.refresh_timer.cancel()
        self.reporter.join(timeout=2.0)
        pygame.quit()

    # ----------------- Drawing -----------------

    def _draw_game(self, sim: Simulation):
        """Renders the game state using Pygame."""
        theme = THEMES.get(sim.mode, THEMES[DAY_MODE])
        screen = self.screen
        screen.fill(theme["sky"])

        self._draw_clouds(theme)
        self._draw_pipes(sim, theme)
        self._draw_ground(theme)
        self._draw_particles()
        self._draw_actor(sim)

        if sim.running:
            self._draw_velocity_indicator(sim)
            self._draw_boost_meter(sim)
        self._draw_score(sim.score)

        if sim.state is GameState.NOT_STARTED:
            self._draw_start_screen(sim)
        elif sim.state is GameState.OVER:
            self._draw_game_over()

        pygame.display.flip()

    def _draw_clouds(self, theme):
        width = self.bounds.screen_width
        for x, y, w, h in ((40, 40, 100, 50), (width / 2 - 80, 60, 120, 60), (width - 140, 50, 100, 50)):
            pygame.draw.rect(self.screen, theme["cloud"], (x, y, w, h))
            pygame.draw.rect(self.screen, theme["cloud"], (x - 15, y + 15, 22, 22))
            pygame.draw.rect(self.screen, theme["cloud"], (x + w / 4, y - 15, 30, 30))
            pygame.draw.rect(self.screen, theme["cloud"], (x + w - 22, y + 8, 30, 30))

    def _draw_pipes(self, sim: Simulation, theme):
        for obstacle in sim.obstacles.obstacles:
            for box in (obstacle.top, obstacle.bottom):
                rect = pygame.Rect(box.x, box.y, box.width, box.height)
                pygame.draw.rect(self.screen, theme["pipe"], rect)
                pygame.draw.rect(self.screen, theme["pipe_border"], rect, 3)
            # Lips at the mouth of each pipe
            lip_top = pygame.Rect(obstacle.x - 4, obstacle.top_height - 24, obstacle.width + 8, 24)
            lip_bottom = pygame.Rect(obstacle.x - 4, obstacle.bottom_y, obstacle.width + 8, 24)
            for lip in (lip_top, lip_bottom):
                pygame.draw.rect(self.screen, theme["pipe"], lip)
                pygame.draw.rect(self.screen, theme["pipe_border"], lip, 3)

    def _draw_ground(self, theme):
        ground_y = self.bounds.ground_y
        width = int(self.bounds.screen_width)
        pygame.draw.rect(self.screen, theme["dirt"], (0, ground_y, width, self.bounds.ground_height))
        pygame.draw.rect(self.screen, theme["ground"], (0, ground_y, width, 16))
        for x in range(0, width, 8):
            grass_height = 8 if x % 16 == 0 else 4
            pygame.draw.rect(self.screen, theme["grass"], (x, ground_y - grass_height, 4, grass_height))

    def _draw_particles(self):
        for p in self.particles.particles:
            size = max(1, int(p.size))
            square = pygame.Surface((size, size))
            square.fill(p.color)
            square.set_alpha(int(255 * max(0.0, min(1.0, p.life))))
            self.screen.blit(square, (int(p.x), int(p.y)))

    def _draw_actor(self, sim: Simulation):
        actor = sim.actor
        body = pygame.Surface((int(actor.width), int(actor.height)), pygame.SRCALPHA)
        body.fill(CHARACTER_COLORS.get(sim.character, WHITE))
        pygame.draw.rect(body, BLACK, body.get_rect(), 3)
        pygame.draw.rect(body, BLACK, (int(actor.width * 0.65), int(actor.height * 0.25), 6, 6))
        if actor.boosting:
            pygame.draw.rect(body, (255, 119, 0), body.get_rect(), 3)

        rotated = pygame.transform.rotate(body, -math.degrees(actor.rotation))
        center = (actor.x + actor.width / 2, actor.y + actor.height / 2)
        self.screen.blit(rotated, rotated.get_rect(center=center))

    def _draw_velocity_indicator(self, sim: Simulation):
        x, y, width, height = 30, 100, 8, 100
        pygame.draw.rect(self.screen, (40, 40, 40), (x, y, width, height))
        per_frame = sim.actor.velocity_y / REFERENCE_RATE
        fill = max(0.0, min(1.0, (per_frame + 8) / 16))
        if per_frame < -2:
            color = (80, 200, 120)
        elif per_frame < 2:
            color = (255, 215, 0)
        else:
            color = (255, 99, 71)
        filled = height * fill
        pygame.draw.rect(self.screen, color, (x, y + height - filled, width, filled))

    def _draw_boost_meter(self, sim: Simulation):
        label = self.font.render("BOOST", True, WHITE)
        self.screen.blit(label, (10, 10))
        pygame.draw.rect(self.screen, WHITE, (10, 30, 54, 12), 2)
        color = (255, 255, 0) if sim.actor.boosting else (255, 85, 0)
        pygame.draw.rect(self.screen, color, (12, 32, int(50 * sim.boost_fraction()), 8))

    def _draw_score(self, score: int):
        text = self.large_font.render(str(score), True, WHITE)
        box_width = text.get_width() + 30
        box = pygame.Rect((self.bounds.screen_width - box_width) / 2, 20, box_width, 40)
        pygame.draw.rect(self.screen, BLACK, box)
        pygame.draw.rect(self.screen, WHITE, box, 2)
        self.screen.blit(text, text.get_rect(center=box.center))

    def _blit_centered(self, text: str, y: float, font=None, color=WHITE):
        surf = (font or self.font).render(text, True, color)
        self.screen.blit(surf, (self.bounds.screen_width / 2 - surf.get_width() / 2, y))

    def _draw_start_screen(self, sim: Simulation):
        self._blit_centered("FLATTENHUND", 160, self.large_font)
        self._blit_centered(f"< {sim.character.upper()} >   (LEFT / RIGHT)", 220)
        self._blit_centered(f"{sim.mode.upper()} MODE   (N)", 250)
        self._blit_centered("SPACE / CLICK to start", 300)
        self._blit_centered("Tap to flap, hold to boost", 330, color=(220, 220, 220))

    def _draw_game_over(self):
        overlay = pygame.Surface(self.screen.get_size())
        overlay.fill(BLACK)
        overlay.set_alpha(140)
        self.screen.blit(overlay, (0, 0))

        outcome = self.reporter.last_outcome
        self._blit_centered("WASTED", 90, self.large_font, (255, 50, 50))
        if outcome is not None:
            self._blit_centered(
                f"Score: {outcome.score}   Best: {outcome.best}   Time: {outcome.duration:.1f}s", 140)
            if outcome.new_best:
                self._blit_centered("NEW HIGH SCORE!", 165, color=(255, 215, 0))
        if self.reporter.saved is False:
            self._blit_centered("Score not saved", 190, color=(255, 150, 150))

        if self.name_entry is not None:
            self._blit_centered("Enter your name, ENTER to save:", 220)
            self._blit_centered(self.name_entry + "_", 245, self.large_font)
        else:
            self._blit_centered("R / CLICK to play again", 230)

        self._blit_centered("Leaderboard", 290, self.large_font)
        for i, entry in enumerate(self.fetch_scores()):
            self._blit_centered(f"{i + 1}. {entry.name} - {entry.score}", 330 + i * 26)
