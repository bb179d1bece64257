"""Abstract base class for schedule transformers."""

from abc import ABC, abstractmethod
from datetime import date
from typing import Any, Optional

from interpreter.models import ScheduleSegment


class BaseTransformer(ABC):
    """Abstract base class defining the interface for schedule transformers.
    
    Extend this class to implement transformers for different output formats
    (e.g., iCalendar, JSON).
    """
    
    @abstractmethod
    def transform(
        self,
        segments: list[ScheduleSegment],
        schedule_id: str,
        anchor_date: Optional[date] = None
    ) -> Any:
        """Transform interpreted schedule segments into the target format.
        
        Args:
            segments: Segments produced by the schedule interpreter.
            schedule_id: Identifier of the stored schedule.
            anchor_date: Day the first occurrence falls on (default: today).
            
        Returns:
            Transformed data in the target format.
        """
        pass
    
    @abstractmethod
    def save(self, output_path: str) -> None:
        """Save the transformed data to a file.
        
        Args:
            output_path: Path to the output file.
        """
        pass
