"""Decision Tree Studio - build decision trees and compile them to diagram text."""

__version__ = "0.1.0"
