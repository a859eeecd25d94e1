icon = {
    "running": "🏃",
    "check": "✅",
    "cross": "❌",
    "warning": "⚠️",
    "spec": "📄",
    "camera": "📸",
    "video": "🎬",
    "report": "📊",
}
