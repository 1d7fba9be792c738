"""Native dialogs via a hidden tkinter root window."""
import tkinter as tk
from tkinter import colorchooser, filedialog, messagebox
from typing import Optional

FILE_TYPES = [
    ("Data files", "*.csv *.xlsx *.xls"),
    ("CSV files", "*.csv"),
    ("Excel files", "*.xlsx *.xls"),
    ("All files", "*.*"),
]


def ask_open_file() -> str:
    root = tk.Tk()
    root.withdraw()
    filepath = filedialog.askopenfilename(title="Select Data File", filetypes=FILE_TYPES)
    root.destroy()
    return filepath


def ask_color(initial: str, level: int) -> Optional[str]:
    root = tk.Tk()
    root.withdraw()
    _, hex_color = colorchooser.askcolor(color=initial,
                                         title=f"Color for trigger level {level}")
    root.destroy()
    return hex_color


def show_warning(title: str, message: str) -> None:
    root = tk.Tk()
    root.withdraw()
    messagebox.showwarning(title, message)
    root.destroy()
