import unittest

from app.models.client_onboarding import OnboardingStep
from app.schemas.onboarding import AdvancementResult


class TestAdvancementMessages(unittest.TestCase):

    def test_auxiliary_task(self):
        result = AdvancementResult(is_auxiliary_task=True)
        self.assertEqual(result.summary_message(), "✅ Tarefa concluída!")

    def test_already_completed(self):
        result = AdvancementResult(already_completed=True)
        self.assertEqual(result.summary_message(), "✅ Tarefa concluída!")

    def test_single_follow_up(self):
        result = AdvancementResult(client_moved=True, tasks_created=1, next_milestone=1)
        self.assertEqual(result.summary_message(), "🎉 Tarefa concluída! Cliente movido e nova tarefa criada.")

    def test_several_follow_ups(self):
        result = AdvancementResult(
            client_moved=True, tasks_created=4, next_step=OnboardingStep.BRIFAR_CRIATIVOS, next_milestone=3
        )
        self.assertEqual(
            result.summary_message(),
            "🎉 Tarefa concluída! Cliente movido para Marco 3 e 4 novas tarefas criadas.",
        )

    def test_onboarding_completed(self):
        result = AdvancementResult(client_moved=True, onboarding_completed=True, day_of_week="sexta")
        self.assertEqual(
            result.summary_message(),
            "🎉 Onboarding concluído! Cliente movido para Acompanhamento - Sexta.",
        )

    def test_moved_without_new_tasks(self):
        result = AdvancementResult(client_moved=True)
        self.assertEqual(result.summary_message(), "🎉 Tarefa concluída! Cliente avançou no onboarding.")


if __name__ == '__main__':
    unittest.main()
