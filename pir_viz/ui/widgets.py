"""UI widget components for the side panel."""
import pygame
from typing import Callable, List, Tuple

# Light color scheme matching the chart
COLORS = {
    'bg': (245, 246, 248),
    'panel': (255, 255, 255),
    'border': (220, 223, 228),
    'text': (51, 51, 51),
    'text_dim': (150, 150, 150),
    'highlight': (52, 152, 219),
    'button': (240, 242, 245),
    'button_hover': (225, 236, 248),
    'button_active': (200, 222, 245),
    'error': (204, 0, 0),
}


class Widget:
    def __init__(self, x: int, y: int, width: int, height: int):
        self.rect = pygame.Rect(x, y, width, height)
        self.visible = True
        self.enabled = True

    def handle_event(self, event: pygame.event.Event) -> bool:
        return False

    def draw(self, surface: pygame.Surface) -> None:
        pass


class Label(Widget):
    def __init__(self, x: int, y: int, text: str, font_size: int = 20,
                 color: Tuple[int, int, int] = None):
        self.text = text
        self.font_size = font_size
        self.color = color or COLORS['text']
        self.font = pygame.font.Font(None, font_size)
        text_surface = self.font.render(text or " ", True, self.color)
        super().__init__(x, y, text_surface.get_width(), text_surface.get_height())

    def set_text(self, text: str, color: Tuple[int, int, int] = None) -> None:
        self.text = text
        if color is not None:
            self.color = color

    def draw(self, surface: pygame.Surface) -> None:
        if not self.visible or not self.text:
            return
        text_surface = self.font.render(self.text, True, self.color)
        surface.blit(text_surface, (self.rect.x, self.rect.y))


class Button(Widget):
    def __init__(self, x: int, y: int, width: int, height: int, text: str,
                 callback: Callable[[], None] = None):
        super().__init__(x, y, width, height)
        self.text = text
        self.callback = callback
        self.font = pygame.font.Font(None, 22)
        self.is_hovered = False
        self.is_pressed = False

    def handle_event(self, event: pygame.event.Event) -> bool:
        if not self.visible or not self.enabled:
            return False
        if event.type == pygame.MOUSEMOTION:
            self.is_hovered = self.rect.collidepoint(event.pos)
        elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
            if self.rect.collidepoint(event.pos):
                self.is_pressed = True
                return True
        elif event.type == pygame.MOUSEBUTTONUP and event.button == 1:
            if self.is_pressed and self.rect.collidepoint(event.pos):
                self.is_pressed = False
                if self.callback:
                    self.callback()
                return True
            self.is_pressed = False
        return False

    def draw(self, surface: pygame.Surface) -> None:
        if not self.visible:
            return
        if self.is_pressed:
            bg_color = COLORS['button_active']
        elif self.is_hovered:
            bg_color = COLORS['button_hover']
        else:
            bg_color = COLORS['button']
        pygame.draw.rect(surface, bg_color, self.rect, border_radius=4)
        pygame.draw.rect(surface, COLORS['border'], self.rect, 1, border_radius=4)
        text_color = COLORS['highlight'] if self.is_hovered else COLORS['text']
        text_surface = self.font.render(self.text, True, text_color)
        text_rect = text_surface.get_rect(center=self.rect.center)
        surface.blit(text_surface, text_rect)


class ColorSwatch(Widget):
    """Legend entry for one trigger level; clicking asks for a new color."""

    def __init__(self, x: int, y: int, level: int,
                 get_color: Callable[[int], Tuple[int, int, int]],
                 callback: Callable[[int], None] = None, size: int = 16):
        super().__init__(x, y, size + 34, size)
        self.level = level
        self.get_color = get_color
        self.callback = callback
        self.size = size
        self.font = pygame.font.Font(None, 18)
        self.is_hovered = False

    def handle_event(self, event: pygame.event.Event) -> bool:
        if not self.visible or not self.enabled:
            return False
        if event.type == pygame.MOUSEMOTION:
            self.is_hovered = self.rect.collidepoint(event.pos)
        elif event.type == pygame.MOUSEBUTTONUP and event.button == 1:
            if self.rect.collidepoint(event.pos):
                if self.callback:
                    self.callback(self.level)
                return True
        return False

    def draw(self, surface: pygame.Surface) -> None:
        if not self.visible:
            return
        center = (self.rect.x + self.size // 2, self.rect.centery)
        pygame.draw.circle(surface, self.get_color(self.level), center, self.size // 2)
        if self.is_hovered:
            pygame.draw.circle(surface, COLORS['highlight'], center, self.size // 2 + 2, 1)
        text_surface = self.font.render(str(self.level), True, COLORS['text'])
        surface.blit(text_surface, (self.rect.x + self.size + 6, self.rect.y + 2))


class Panel(Widget):
    def __init__(self, x: int, y: int, width: int, height: int, title: str = ""):
        super().__init__(x, y, width, height)
        self.title = title
        self.widgets: List[Widget] = []
        self.font = pygame.font.Font(None, 22)

    def add_widget(self, widget: Widget) -> None:
        widget.rect.x += self.rect.x
        widget.rect.y += self.rect.y
        self.widgets.append(widget)

    def handle_event(self, event: pygame.event.Event) -> bool:
        if not self.visible:
            return False
        for widget in reversed(self.widgets):
            if widget.handle_event(event):
                return True
        return False

    def draw(self, surface: pygame.Surface) -> None:
        if not self.visible:
            return
        pygame.draw.rect(surface, COLORS['panel'], self.rect)
        pygame.draw.rect(surface, COLORS['border'], self.rect, 1)
        if self.title:
            title_surface = self.font.render(self.title, True, COLORS['highlight'])
            surface.blit(title_surface, (self.rect.x + 10, self.rect.y + 5))
            pygame.draw.line(surface, COLORS['border'],
                             (self.rect.x + 5, self.rect.y + 25),
                             (self.rect.right - 5, self.rect.y + 25))
        for widget in self.widgets:
            widget.draw(surface)
