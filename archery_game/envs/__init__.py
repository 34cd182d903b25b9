from archery_game.envs.bow_env import BowRangeEnv, DEFAULT_ENV_CONFIG

__all__ = ["BowRangeEnv", "DEFAULT_ENV_CONFIG"]
