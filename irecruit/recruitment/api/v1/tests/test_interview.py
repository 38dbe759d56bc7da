from django.urls import reverse
from django.utils import timezone
from rest_framework import status

from irecruit.common.tests.common import RecruitAPITestCase
from irecruit.identity.tests.factory import JobSeekerFactory, StaffMemberFactory
from irecruit.recruitment.api.v1.tests.factory import (
    ApplicationFactory, InterviewFactory
)
from irecruit.recruitment.constants import (
    UNDER_REVIEW, INTERVIEW_SCHEDULED, INTERVIEWED, REJECTED, SCHEDULED,
    COMPLETED, NO_SHOW, VIDEO, NO_SHOW_REJECTION_REASON
)
from irecruit.recruitment.models import Interview


class TestInterviewAPI(RecruitAPITestCase):
    def setUp(self):
        self.hr = StaffMemberFactory()
        self.login_as_hr(self.hr)

    @property
    def list_url(self):
        return reverse('api_v1:recruitment:interview-list')

    @staticmethod
    def detail_url(interview, action=None):
        name = f'api_v1:recruitment:interview-{action or "detail"}'
        return reverse(name, kwargs={'pk': interview.pk})

    def test_schedule_interview(self):
        application = ApplicationFactory(status=UNDER_REVIEW)
        scheduled_at = timezone.now() + timezone.timedelta(days=1)

        response = self.client.post(
            self.list_url,
            data={
                'application': str(application.id),
                'scheduled_at': scheduled_at.isoformat(),
                'interview_type': VIDEO,
                'meeting_link': 'https://meet.example.com/abc',
                'interviewer_ref': self.hr.identity_ref,
            },
            format='json'
        )

        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        self.assertEqual(response.data['status'], SCHEDULED)
        self.assertEqual(response.data['application_status'], INTERVIEW_SCHEDULED)
        self.assertEqual(
            Interview.objects.get(pk=response.data['id']).created_by_ref,
            self.hr.identity_ref
        )

    def test_schedule_in_past(self):
        application = ApplicationFactory(status=UNDER_REVIEW)
        response = self.client.post(
            self.list_url,
            data={
                'application': str(application.id),
                'scheduled_at': (timezone.now() - timezone.timedelta(hours=1)).isoformat(),
                'interview_type': VIDEO,
            },
            format='json'
        )
        self.assertErrorCode(response, status.HTTP_400_BAD_REQUEST, 'invalid_schedule')

    def test_applicant_reads_but_cannot_schedule(self):
        job_seeker = JobSeekerFactory()
        own = InterviewFactory(
            application=ApplicationFactory(
                applicant_ref=job_seeker.id, status=INTERVIEW_SCHEDULED
            ),
            scheduled_at=timezone.now() + timezone.timedelta(days=1)
        )
        other = InterviewFactory(
            scheduled_at=timezone.now() + timezone.timedelta(days=1),
            feedback='weak candidate',
            rating=2
        )
        self.login_as_applicant(job_seeker)

        response = self.client.get(self.list_url)
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([i['id'] for i in response.data['results']], [str(own.id)])
        self.assertEqual(
            self.client.get(self.detail_url(other)).status_code,
            status.HTTP_404_NOT_FOUND
        )
        response = self.client.get(reverse('api_v1:recruitment:interview-upcoming'))
        self.assertEqual([i['id'] for i in response.data['results']], [str(own.id)])

        response = self.client.post(self.list_url, data={}, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_unrelated_applicant_sees_no_interviews(self):
        InterviewFactory(feedback='weak candidate', rating=2)
        self.login_as_applicant(JobSeekerFactory())

        response = self.client.get(self.list_url)
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['results'], [])

    def test_unknown_role_cannot_read(self):
        InterviewFactory()
        self.login_as(self.hr.identity_ref, '')
        self.assertEqual(self.client.get(self.list_url).status_code, status.HTTP_403_FORBIDDEN)

        self.login_as(self.hr.identity_ref, 'AUDITOR')
        self.assertEqual(self.client.get(self.list_url).status_code, status.HTTP_403_FORBIDDEN)

    def test_complete_and_feedback(self):
        interview = InterviewFactory()

        self.assertErrorCode(
            self.client.post(
                self.detail_url(interview, 'feedback'),
                data={'feedback': 'Early', 'rating': 5},
                format='json'
            ),
            status.HTTP_409_CONFLICT, 'not_completed'
        )

        response = self.client.post(self.detail_url(interview, 'complete'))
        self.assertEqual(response.data['status'], COMPLETED)
        self.assertEqual(response.data['application_status'], INTERVIEWED)

        response = self.client.post(
            self.detail_url(interview, 'feedback'),
            data={'feedback': 'Clear communicator', 'rating': 11},
            format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

        response = self.client.post(
            self.detail_url(interview, 'feedback'),
            data={'feedback': 'Clear communicator', 'rating': 9},
            format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(response.data['rating'], 9)

        self.assertErrorCode(
            self.client.patch(
                self.detail_url(interview), data={'location': 'Room 4'}, format='json'
            ),
            status.HTTP_409_CONFLICT, 'not_schedulable'
        )

    def test_no_show(self):
        interview = InterviewFactory()

        response = self.client.post(self.detail_url(interview, 'no-show'))

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(response.data['status'], NO_SHOW)
        interview.application.refresh_from_db()
        self.assertEqual(interview.application.status, REJECTED)
        self.assertEqual(interview.application.rejection_reason, NO_SHOW_REJECTION_REASON)

    def test_reschedule_and_cancel(self):
        interview = InterviewFactory()

        response = self.client.patch(
            self.detail_url(interview), data={'location': 'Room 4'}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(response.data['location'], 'Room 4')

        response = self.client.delete(self.detail_url(interview))
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertEqual(
            self.client.get(self.detail_url(interview)).status_code,
            status.HTTP_404_NOT_FOUND
        )

    def test_upcoming_and_today(self):
        soon = InterviewFactory(scheduled_at=timezone.now() + timezone.timedelta(days=1))
        InterviewFactory(scheduled_at=timezone.now() + timezone.timedelta(days=20))

        response = self.client.get(reverse('api_v1:recruitment:interview-upcoming'))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([i['id'] for i in response.data['results']], [str(soon.id)])

        start = timezone.now() + timezone.timedelta(days=3)
        response = self.client.get(
            reverse('api_v1:recruitment:interview-upcoming'),
            data={
                'start': start.isoformat(),
                'end': (start - timezone.timedelta(days=1)).isoformat(),
            }
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

        response = self.client.get(reverse('api_v1:recruitment:interview-today'))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
