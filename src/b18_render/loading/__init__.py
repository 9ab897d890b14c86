from .loader import load_game, game_path, LoaderError

__all__ = ["load_game", "game_path", "LoaderError"]
