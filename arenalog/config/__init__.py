from .config_manager import IngestionConfig, RunnerPreferences, detect_player_log_path

__all__ = ['IngestionConfig', 'RunnerPreferences', 'detect_player_log_path']
