"""
User-facing messages for the exam runner, per interface language.

Only the interface is translated; the bank format keywords (ANSWER:) are not.
"""

TRANSLATIONS = {
    "en": {
        "header": "=" * 60,
        "title": "AIKEN Quiz Runner",
        "bank_loading": "Loading question bank '{bank}'...",
        "ask_enc_pass": "Enter key or password for '{bank}': ",
        "enc_error": "Error: A key or password is required for encrypted banks.",
        "enc_exit": "Exiting.",
        "bank_error": "Error: Failed to load the question bank.\nDetails: {error}",
        "bank_rejected": "The question bank is not valid AIKEN ({kind}):\n  {message}",
        "bank_success": "✓ Question bank loaded: {count} questions",
        "config_error": "Configuration error: {error}",
        "config_source": "✓ Configuration: {src}",
        "setup_header": "Setup - bank of {bank_size} questions",
        "setup_preview": "{count} random questions, {minutes} minutes, graded over {scale:g}.",
        "setup_help": "Commands: count N, minutes M, scale S, start, quit",
        "setup_value_error": "Please enter a number for '{command}'.",
        "empty_bank": "The bank has no questions. Use 'quit' and load another file.",
        "exam_started": "Exam started: {count} questions, {minutes} minutes. Type 'help' for commands.",
        "exam_help": (
            "Commands:\n"
            "  show          Show the current question\n"
            "  next / prev   Move to the next / previous question\n"
            "  goto N        Jump to question N\n"
            "  answer X      Choose option X (a bare letter also works)\n"
            "  flag          Mark / unmark the current question for review\n"
            "  status        List answered and flagged questions\n"
            "  time          Show the remaining time\n"
            "  submit        Submit the exam"
        ),
        "question_heading": "Question {number} of {total} | Answered: {answered}/{total} | Time: {time}",
        "question_flagged": "[flagged for review]",
        "answer_saved": "Answer {key} saved for question {number}.",
        "answer_usage": "Usage: answer X",
        "goto_usage": "Usage: goto N",
        "flag_on": "Question {number} flagged for review.",
        "flag_off": "Question {number} unflagged.",
        "status_line": "  {number:>3}. {answered} {flag}",
        "status_answered": "answered",
        "status_unanswered": "-",
        "status_flagged": "(flagged)",
        "time_left": "Time left: {time} ({progress}% used)",
        "submit_confirm": "{unanswered} question(s) unanswered. Submit anyway? [y/N]: ",
        "submit_cancel": "Submission cancelled.",
        "time_up": "Time is up! The exam was submitted automatically.",
        "result_header": "Results",
        "result_score": "Correct: {correct} | Incorrect: {incorrect} | Total: {total}",
        "result_grade": "Grade: {grade:.2f} / {scale:g}",
        "result_help": "Commands: review, retry, setup, load FILE, quit",
        "review_correct": "Correct",
        "review_incorrect": "Incorrect",
        "review_line": "{number}. {verdict} - your answer: {chosen} | correct: {answer}",
        "review_unanswered": "(unanswered)",
        "load_usage": "Usage: load FILE",
        "upload_help": "Commands: load FILE, quit",
        "unknown_command": "Unknown command: '{command}'. Type 'help' for a list of commands.",
        "goodbye": "Goodbye.",
    },
    "es": {
        "header": "=" * 60,
        "title": "AIKEN Quiz",
        "bank_loading": "Cargando banco de preguntas '{bank}'...",
        "ask_enc_pass": "Ingresa la clave o contraseña de '{bank}': ",
        "enc_error": "Error: Los bancos cifrados requieren una clave o contraseña.",
        "enc_exit": "Saliendo.",
        "bank_error": "Error: No se pudo cargar el banco de preguntas.\nDetalles: {error}",
        "bank_rejected": "El banco no es AIKEN válido ({kind}):\n  {message}",
        "bank_success": "✓ Banco cargado: {count} preguntas",
        "config_error": "Error de configuración: {error}",
        "config_source": "✓ Configuración: {src}",
        "setup_header": "Configurar examen - banco de {bank_size} preguntas",
        "setup_preview": "Se seleccionarán {count} preguntas aleatorias y tendrás {minutes} minutos; nota sobre {scale:g}.",
        "setup_help": "Comandos: count N, minutes M, scale S, start, quit",
        "setup_value_error": "Ingresa un número para '{command}'.",
        "empty_bank": "El banco no tiene preguntas. Usa 'quit' y carga otro archivo.",
        "exam_started": "Examen iniciado: {count} preguntas, {minutes} minutos. Escribe 'help' para ver los comandos.",
        "exam_help": (
            "Comandos:\n"
            "  show          Mostrar la pregunta actual\n"
            "  next / prev   Pregunta siguiente / anterior\n"
            "  goto N        Ir a la pregunta N\n"
            "  answer X      Elegir la opción X (también basta la letra)\n"
            "  flag          Marcar / desmarcar la pregunta para revisión\n"
            "  status        Ver preguntas respondidas y marcadas\n"
            "  time          Ver el tiempo restante\n"
            "  submit        Enviar el examen"
        ),
        "question_heading": "Pregunta {number} de {total} | Respondidas: {answered}/{total} | Tiempo: {time}",
        "question_flagged": "[marcada para revisión]",
        "answer_saved": "Respuesta {key} guardada para la pregunta {number}.",
        "answer_usage": "Uso: answer X",
        "goto_usage": "Uso: goto N",
        "flag_on": "Pregunta {number} marcada para revisión.",
        "flag_off": "Pregunta {number} desmarcada.",
        "status_line": "  {number:>3}. {answered} {flag}",
        "status_answered": "respondida",
        "status_unanswered": "-",
        "status_flagged": "(marcada)",
        "time_left": "Tiempo restante: {time} ({progress}% usado)",
        "submit_confirm": "{unanswered} pregunta(s) sin responder. ¿Enviar de todos modos? [y/N]: ",
        "submit_cancel": "Envío cancelado.",
        "time_up": "¡Se acabó el tiempo! El examen se envió automáticamente.",
        "result_header": "Resultados",
        "result_score": "Correctas: {correct} | Incorrectas: {incorrect} | Total: {total}",
        "result_grade": "Nota: {grade:.2f} / {scale:g}",
        "result_help": "Comandos: review, retry, setup, load ARCHIVO, quit",
        "review_correct": "Correcta",
        "review_incorrect": "Incorrecta",
        "review_line": "{number}. {verdict} - tu respuesta: {chosen} | correcta: {answer}",
        "review_unanswered": "(sin responder)",
        "load_usage": "Uso: load ARCHIVO",
        "upload_help": "Comandos: load ARCHIVO, quit",
        "unknown_command": "Comando desconocido: '{command}'. Escribe 'help' para ver los comandos.",
        "goodbye": "Hasta luego.",
    },
}
