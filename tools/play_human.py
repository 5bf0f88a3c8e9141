"""
Human Play Mode
===============

Play Val & Debt interactively. This is the frame driver: it samples input,
steps the game once per display frame and draws the result.

Controls:
    - Mouse: Move the portfolio
    - A/D or Left/Right: Move with the keyboard
    - Space/Click: Start (from the menu) or retry (after game over)
    - R: Restart
    - ESC: Quit

Usage:
    python -m tools.play_human [--seed SEED] [--width WIDTH] [--height HEIGHT]
"""

from __future__ import annotations

import argparse
import logging
import random
import sys
from typing import Optional

try:
    import pygame
    PYGAME_AVAILABLE = True
except ImportError:
    PYGAME_AVAILABLE = False

from valdebt.core.config_loader import load_config, GameConfig
from valdebt.core.events import GameEvent
from valdebt.core.game import CoreGame
from valdebt.core.kinds import GameStatus
from valdebt.core.persistence import HighScoreStore
from valdebt.core.render_pygame import render


LABELS_EN = {
    "title": "VAL & DEBT",
    "tagline": "Catch Assets. Dodge Debt. Build Wealth.",
    "highScore": "High Score",
    "startGame": "START GAME",
    "controlsMove": "Mouse / Touch to move",
    "bullMarket": "BULL MARKET",
    "marketCrash": "MARKET CRASH",
    "combo": "COMBO",
    "level": "LVL",
    "retry": "RETRY",
    "newHighScore": "NEW HIGH SCORE",
    "finalPortfolio": "Final Portfolio",
    "totalGains": "Total Gains",
    "totalLosses": "Total Losses",
    "familyHome": "Family Home",
    "stocksLabel": "Stocks",
    "educationLabel": "Education",
    "commPlaza": "Comm. Plaza",
    "maintenance": "Maintenance",
    "interestHike": "Interest Hike",
    "marketCrashLabel": "Market Crash",
    "performanceAnalysisPositive": "Your gains far outweigh your losses.",
    "performanceAnalysisNegative": "Your losses exceeded your gains this period.",
}

LABELS_ES = {
    "title": "VAL & DEUDA",
    "tagline": "Atrapa Activos. Esquiva Deudas. Crea Riqueza.",
    "highScore": "Récord",
    "startGame": "INICIAR JUEGO",
    "controlsMove": "Ratón / Tocar para mover",
    "bullMarket": "MERCADO ALCISTA",
    "marketCrash": "COLAPSO DEL MERCADO",
    "combo": "COMBO",
    "level": "NIVEL",
    "retry": "REINTENTAR",
    "newHighScore": "NUEVO RÉCORD",
    "finalPortfolio": "Cartera Final",
    "totalGains": "Ganancias Totales",
    "totalLosses": "Pérdidas Totales",
    "familyHome": "Vivienda",
    "stocksLabel": "Acciones",
    "educationLabel": "Educación",
    "commPlaza": "Plaza Comercial",
    "maintenance": "Mantenimiento",
    "interestHike": "Alza de Tasas",
    "marketCrashLabel": "Colapso",
    "performanceAnalysisPositive": "Tus ganancias superan con creces tus pérdidas.",
    "performanceAnalysisNegative": "Tus pérdidas superaron tus ganancias este periodo.",
}

LANGUAGES = {"en": LABELS_EN, "es": LABELS_ES}


class ConsoleAudio:
    """Audio sink that prints cues instead of playing them."""

    def __init__(self):
        self._ambient = False

    def cue(self, event: GameEvent) -> None:
        if event in (GameEvent.NEGATIVE_HIT, GameEvent.TERMINAL_HIT, GameEvent.BULL_MARKET_START):
            print(f"  [{event.value}]")

    def set_ambient(self, on: bool) -> None:
        self._ambient = on


class HumanPlayer:
    """Interactive pygame frame driver."""

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        seed: Optional[int] = None,
        window_width: int = 960,
        window_height: int = 540,
        target_fps: int = 60,
        language: str = "en",
        high_score_path: Optional[str] = None
    ):
        if not PYGAME_AVAILABLE:
            raise ImportError("pygame required. Install: pip install pygame")

        if config is None:
            config = load_config()

        self._config = config
        self._seed = seed
        self._window_width = window_width
        self._window_height = window_height
        self._target_fps = target_fps
        self._labels = LANGUAGES.get(language, LABELS_EN)

        self._game = CoreGame(
            config=config,
            seed=seed,
            store=HighScoreStore(high_score_path, config),
            audio=ConsoleAudio()
        )
        self._render_rng = random.Random(seed)

        pygame.init()
        self._screen = pygame.display.set_mode((window_width, window_height))
        pygame.display.set_caption(self._label("title"))
        self._clock = pygame.time.Clock()
        self._font = pygame.font.Font(None, 36)
        self._font_small = pygame.font.Font(None, 24)

        self._running = True
        self._reported = False
        self._keys_left = False
        self._keys_right = False

    def _label(self, key: str) -> str:
        return self._labels.get(key, key)

    def run(self) -> int:
        """Run the game loop. Returns final score."""
        print("=== Val & Debt ===")
        print("Mouse or A/D to move, Space/Click to start, R to restart, ESC to quit")
        print()

        while self._running:
            self._handle_events()

            state = self._game.step(self._window_width, self._window_height)
            if state.status == GameStatus.GAMEOVER and not self._reported:
                self._print_report()
                self._reported = True

            self._render()
            self._clock.tick(self._target_fps)

        pygame.quit()
        return self._game.score

    def _handle_events(self) -> None:
        """Process pygame events into the player intent."""
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self._running = False

            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    self._running = False
                elif event.key == pygame.K_r:
                    self._restart()
                elif event.key == pygame.K_SPACE and self._game.state.status != GameStatus.PLAYING:
                    self._restart()
                elif event.key in (pygame.K_a, pygame.K_LEFT):
                    self._keys_left = True
                elif event.key in (pygame.K_d, pygame.K_RIGHT):
                    self._keys_right = True

            elif event.type == pygame.KEYUP:
                if event.key in (pygame.K_a, pygame.K_LEFT):
                    self._keys_left = False
                elif event.key in (pygame.K_d, pygame.K_RIGHT):
                    self._keys_right = False

            elif event.type == pygame.MOUSEMOTION:
                self._game.intent.point_at(event.pos[0] / self._window_width)

            elif event.type == pygame.MOUSEBUTTONDOWN:
                if event.button == 1 and self._game.state.status != GameStatus.PLAYING:
                    self._restart()

        self._game.intent.hold(int(self._keys_right) - int(self._keys_left))

    def _restart(self) -> None:
        """Start a fresh run, keeping the high score."""
        self._game.start_run()
        self._reported = False
        print("\n=== Run Started ===\n")

    def _print_report(self) -> None:
        report = self._game.run_report()
        print(f"\n{self._label('marketCrash')} - {self._label('finalPortfolio')}: {report.final_score}")
        if report.is_new_high_score:
            print(f"  * {self._label('newHighScore')} *")
        print(f"  {self._label('totalGains')}: {report.total_gains}")
        for line in report.assets:
            print(f"    {self._label(line.label_key)}: +{line.amount}")
        print(f"  {self._label('totalLosses')}: {report.total_losses}")
        for line in report.liabilities:
            print(f"    {self._label(line.label_key)}: -{line.amount}")
        print(f"  {self._label(report.performance_key)}")

    def _render(self) -> None:
        state = self._game.state
        render(
            self._screen,
            state,
            self._window_width,
            self._window_height,
            self._label,
            self._render_rng,
            self._config
        )
        self._draw_hud()
        pygame.display.flip()

    def _draw_hud(self) -> None:
        """Minimal HUD; full overlay screens belong to a real front end."""
        state = self._game.state
        hud = (
            f"{state.score}   {'♥' * state.lives}   "
            f"{self._label('level')} {state.difficulty}   "
            f"{self._label('highScore')}: {state.high_score}"
        )
        self._screen.blit(self._font.render(hud, True, (10, 0, 71)), (12, 10))

        if state.status == GameStatus.MENU:
            lines = [self._label("title"), self._label("tagline"), self._label("startGame")]
            for i, text in enumerate(lines):
                rendered = self._font.render(text, True, (10, 0, 71))
                self._screen.blit(rendered, rendered.get_rect(
                    center=(self._window_width // 2, self._window_height // 3 + i * 44)
                ))
        elif state.status == GameStatus.GAMEOVER:
            rendered = self._font_small.render(self._label("retry"), True, (10, 0, 71))
            self._screen.blit(rendered, rendered.get_rect(
                center=(self._window_width // 2, self._window_height // 2 + 50)
            ))


def main():
    parser = argparse.ArgumentParser(description="Play Val & Debt interactively")
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    parser.add_argument("--width", type=int, default=960, help="Window width (default: 960)")
    parser.add_argument("--height", type=int, default=540, help="Window height (default: 540)")
    parser.add_argument("--fps", type=int, default=60, help="Target FPS")
    parser.add_argument("--lang", choices=sorted(LANGUAGES), default="en", help="Label language")
    parser.add_argument("--high-score-file", default=None, help="High score JSON file")
    parser.add_argument("--log-level", default="WARNING", help="Python logging level")

    args = parser.parse_args()
    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )

    try:
        config = load_config()
        player = HumanPlayer(
            config=config,
            seed=args.seed,
            window_width=args.width,
            window_height=args.height,
            target_fps=args.fps,
            language=args.lang,
            high_score_path=args.high_score_file
        )
        score = player.run()
        print(f"\nFinal Score: {score}")
        return 0
    except ImportError as e:
        print(f"Error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
