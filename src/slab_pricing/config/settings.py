"""
Centralized settings and path configuration for slab pricing.
"""
import os
from pathlib import Path
from dataclasses import dataclass
from typing import Optional


def get_project_root() -> Path:
    """Get the project root directory (where pyproject.toml lives)."""
    current = Path(__file__).resolve()
    for parent in current.parents:
        if (parent / 'pyproject.toml').exists():
            return parent
    # Fallback to 3 levels up from this file
    return Path(__file__).resolve().parent.parent.parent.parent


@dataclass
class Settings:
    """Application settings with sensible defaults."""
    
    # Project paths
    project_root: Path
    data_dir: Path
    
    # Inventory records (selling price, stock levels, slabs)
    inventory_csv: Path
    
    # Display
    currency_symbol: str = '₹'
    
    # Width of the range suggested when a new slab is added
    new_slab_span: int = 10
    
    # Quantities shown in the price preview table
    preview_quantities: tuple = (1, 5, 10, 25, 50)
    
    log_level: str = 'INFO'
    
    @classmethod
    def load(cls, project_root: Optional[Path] = None) -> 'Settings':
        """Load settings from the project structure and environment."""
        root = project_root or get_project_root()
        
        data_dir_env = os.environ.get('SLAB_PRICING_DATA_DIR')
        data_dir = Path(data_dir_env) if data_dir_env else root / 'data'
        
        return cls(
            project_root=root,
            data_dir=data_dir,
            inventory_csv=data_dir / 'inventory.csv',
            currency_symbol=os.environ.get('SLAB_PRICING_CURRENCY', '₹'),
            log_level=os.environ.get('SLAB_PRICING_LOG_LEVEL', 'INFO'),
        )


# Default settings instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get the global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings.load()
    return _settings

