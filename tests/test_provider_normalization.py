"""
Unit tests for the per-provider normalizers.

Every provider in the catalogue gets one test mapping a documented raw response to
its exact canonical profile, plus tests for the edge cases of its payload.
"""

import unittest
from unittest.mock import Mock
import sys
import os

sys.path.insert(0, os.path.dirname(__file__))

from signin_proxy.exceptions import MalformedResponseError
from signin_proxy.providers import (
    PROVIDER_CLASSES, ProviderHTTPClient,
    AzureADProvider, BitbucketProvider, DiscordProvider, FacebookProvider,
    GitHubProvider, GitLabProvider, GoogleProvider, LinkedInProvider,
    SpotifyProvider, StravaProvider, TwitchProvider, WorkOSProvider
)

from provider_fixtures import (
    ACCESS_TOKEN, provider_config, raw_response,
    AZUREAD_CLAIMS, BITBUCKET_PROFILE, BITBUCKET_EMAILS, DISCORD_PROFILE,
    FACEBOOK_PROFILE, GITHUB_PROFILE, GITHUB_EMAILS, GITLAB_PROFILE, GOOGLE_PROFILE,
    LINKEDIN_PROFILE, LINKEDIN_EMAILS, SPOTIFY_PROFILE, STRAVA_PROFILE,
    TWITCH_PROFILE, WORKOS_PROFILE
)


class ProviderTestCase(unittest.TestCase):
    """Base class providing a fake HTTP client for secondary calls."""

    def setUp(self):
        self.http = Mock(spec=ProviderHTTPClient)

    def build(self, provider_class, **settings):
        return provider_class(provider_config(provider_class.name, **settings))


class TestProviderCatalogue(unittest.TestCase):
    """Test cases for the closed provider catalogue."""

    def test_catalogue_lists_every_provider(self):
        """Test that the catalogue holds exactly the supported providers."""
        self.assertEqual(
            sorted(PROVIDER_CLASSES),
            ['azuread', 'bitbucket', 'discord', 'facebook', 'github', 'gitlab',
             'google', 'linkedin', 'spotify', 'strava', 'twitch', 'workos']
        )

    def test_catalogue_keys_match_provider_names(self):
        """Test that each provider is keyed by its own name."""
        for name, provider_class in PROVIDER_CLASSES.items():
            self.assertEqual(provider_class.name, name)


class TestAzureADProvider(ProviderTestCase):

    def test_normalize_from_id_token(self):
        """Test Azure AD mapping reads the id_token claims."""
        provider = self.build(AzureADProvider)
        profile = provider.normalize(raw_response({}, jwt={'id_token': {'payload': AZUREAD_CLAIMS}}), self.http)

        self.assertEqual(profile.to_dict(), {
            'id': '00000000-0000-0000-66f3-3332eca7ea81',
            'displayName': 'Abe Lincoln',
            'email': 'abeli@microsoft.com',
        })
        self.http.get_json.assert_not_called()

    def test_missing_id_token(self):
        """Test Azure AD response without identity token claims."""
        provider = self.build(AzureADProvider)
        with self.assertRaises(MalformedResponseError):
            provider.normalize(raw_response({}), self.http)

    def test_tenant_in_endpoints(self):
        """Test that the configured tenant is part of every endpoint."""
        provider = self.build(AzureADProvider, tenant='contoso.onmicrosoft.com')
        self.assertEqual(
            provider.authorize_url,
            'https://login.microsoftonline.com/contoso.onmicrosoft.com/oauth2/v2.0/authorize'
        )
        self.assertIn('/contoso.onmicrosoft.com/oauth2/v2.0/token', provider.token_url)
        self.assertEqual(
            provider.client_kwargs()['server_metadata_url'],
            'https://login.microsoftonline.com/contoso.onmicrosoft.com/v2.0/.well-known/openid-configuration'
        )

    def test_default_tenant(self):
        """Test that the common tenant is used when none is configured."""
        provider = self.build(AzureADProvider)
        self.assertEqual(provider.authorize_url, 'https://login.microsoftonline.com/common/oauth2/v2.0/authorize')


class TestBitbucketProvider(ProviderTestCase):

    def test_normalize_with_email_endpoint(self):
        """Test Bitbucket mapping with the email from /user/emails."""
        self.http.get_json.return_value = BITBUCKET_EMAILS
        provider = self.build(BitbucketProvider)

        profile = provider.normalize(raw_response(BITBUCKET_PROFILE), self.http)

        self.assertEqual(profile.to_dict(), {
            'id': '{d301aafa-d676-4ee0-88be-962be7417567}',
            'displayName': 'Erik van Zijst',
            'email': 'erik@bitbucket.example',
            'emailVerified': True,
            'avatarUrl': 'https://bitbucket.org/account/evzijst/avatar/32/',
        })
        self.http.get_json.assert_called_once_with(
            'https://api.bitbucket.org/2.0/user/emails', ACCESS_TOKEN, provider='bitbucket'
        )


class TestDiscordProvider(ProviderTestCase):

    def test_normalize(self):
        """Test Discord mapping with handle, avatar template and locale."""
        provider = self.build(DiscordProvider)
        profile = provider.normalize(raw_response(DISCORD_PROFILE), self.http)

        self.assertEqual(profile.to_dict(), {
            'id': '80351110224678912',
            'displayName': 'Nelly#1337',
            'email': 'nelly@discord.com',
            'emailVerified': True,
            'avatarUrl': 'https://cdn.discordapp.com/avatars/80351110224678912/8342729096ea3675442027381ff50dfe.png',
            'locale': 'en',
        })
        self.http.get_json.assert_not_called()

    def test_unique_username_without_discriminator(self):
        """Test that the "0" discriminator of unique usernames is not appended."""
        provider = self.build(DiscordProvider)
        profile = provider.normalize(raw_response(dict(DISCORD_PROFILE, discriminator='0')), self.http)
        self.assertEqual(profile.display_name, 'Nelly')

    def test_missing_avatar_and_unverified(self):
        """Test that a user without avatar gets no avatar URL."""
        provider = self.build(DiscordProvider)
        payload = dict(DISCORD_PROFILE, avatar=None, verified=False)
        del payload['email']

        profile = provider.normalize(raw_response(payload), self.http)

        self.assertIsNone(profile.avatar_url)
        self.assertIsNone(profile.email)
        self.assertFalse(profile.email_verified)


class TestFacebookProvider(ProviderTestCase):

    def test_normalize(self):
        """Test Facebook mapping with the nested picture URL."""
        provider = self.build(FacebookProvider)
        profile = provider.normalize(raw_response(FACEBOOK_PROFILE), self.http)

        self.assertEqual(profile.to_dict(), {
            'id': '10158234567890123',
            'displayName': 'Mark Example',
            'email': 'mark@example.com',
            'avatarUrl': 'https://platform-lookaside.fbsbx.com/p.jpg',
        })

    def test_comma_delimited_scope(self):
        """Test that Facebook scopes are joined with commas."""
        provider = self.build(FacebookProvider)
        self.assertEqual(provider.oauth_params()['scope_delimiter'], ',')


class TestGitHubProvider(ProviderTestCase):

    def test_normalize_with_email_endpoint(self):
        """Test GitHub mapping with the primary email from /user/emails."""
        self.http.get_json.return_value = GITHUB_EMAILS
        provider = self.build(GitHubProvider)

        profile = provider.normalize(raw_response(GITHUB_PROFILE), self.http)

        self.assertEqual(profile.to_dict(), {
            'id': '583231',
            'displayName': 'The Octocat',
            'email': 'octocat@github.com',
            'emailVerified': True,
            'avatarUrl': 'https://avatars.githubusercontent.com/u/583231?v=4',
        })
        self.http.get_json.assert_called_once_with(
            'https://api.github.com/user/emails', ACCESS_TOKEN, provider='github'
        )

    def test_login_used_without_name(self):
        """Test that the login is the display name when the user has no name set."""
        self.http.get_json.return_value = GITHUB_EMAILS
        provider = self.build(GitHubProvider)

        profile = provider.normalize(raw_response(dict(GITHUB_PROFILE, name=None)), self.http)

        self.assertEqual(profile.display_name, 'octocat')

    def test_no_email_records(self):
        """Test that an empty email list leaves the email absent."""
        self.http.get_json.return_value = []
        provider = self.build(GitHubProvider)

        profile = provider.normalize(raw_response(GITHUB_PROFILE), self.http)

        self.assertIsNone(profile.email)
        self.assertIsNone(profile.email_verified)
        self.assertNotIn('email', profile.to_dict())


class TestGitLabProvider(ProviderTestCase):

    def test_normalize(self):
        """Test GitLab mapping with numeric id rendered as string."""
        provider = self.build(GitLabProvider)
        profile = provider.normalize(raw_response(GITLAB_PROFILE), self.http)

        self.assertEqual(profile.to_dict(), {
            'id': '1',
            'displayName': 'John Smith',
            'email': 'john@example.com',
            'avatarUrl': 'https://gitlab.com/uploads/user/avatar/1/index.jpg',
        })


class TestGoogleProvider(ProviderTestCase):

    def test_normalize(self):
        """Test Google mapping from the OpenID userinfo document."""
        provider = self.build(GoogleProvider)
        profile = provider.normalize(raw_response(GOOGLE_PROFILE), self.http)

        self.assertEqual(profile.to_dict(), {
            'id': '110169484474386276334',
            'displayName': 'Jane Doe',
            'email': 'jane.doe@gmail.com',
            'emailVerified': True,
            'avatarUrl': 'https://lh3.googleusercontent.com/a/photo.jpg',
            'locale': 'en',
        })
        self.http.get_json.assert_not_called()

    def test_offline_access_param(self):
        """Test that Google requests offline access without forcing consent."""
        provider = self.build(GoogleProvider)
        params = provider.oauth_params()

        self.assertEqual(params['custom_params'], {'access_type': 'offline'})
        self.assertNotIn('prompt', params['custom_params'])

    def test_missing_subject(self):
        """Test that a userinfo document without sub is rejected."""
        provider = self.build(GoogleProvider)
        payload = dict(GOOGLE_PROFILE)
        del payload['sub']

        with self.assertRaises(MalformedResponseError) as ctx:
            provider.normalize(raw_response(payload), self.http)
        self.assertEqual(ctx.exception.provider, 'google')


class TestLinkedInProvider(ProviderTestCase):

    def test_normalize_with_email_endpoint(self):
        """Test LinkedIn mapping with joined names, public picture and email endpoint."""
        self.http.get_json.return_value = LINKEDIN_EMAILS
        provider = self.build(LinkedInProvider)

        profile = provider.normalize(raw_response(LINKEDIN_PROFILE), self.http)

        self.assertEqual(profile.to_dict(), {
            'id': 'yrZCpj2Z12',
            'displayName': 'Bob Smith',
            'email': 'bob.smith@example.com',
            'avatarUrl': 'https://media.licdn.com/bob_100.jpg',
            'locale': 'en',
        })
        self.http.get_json.assert_called_once_with(
            'https://api.linkedin.com/v2/emailAddress?q=members&projection=(elements*(handle~))',
            ACCESS_TOKEN,
            provider='linkedin'
        )

    def test_without_picture(self):
        """Test that a profile without a public picture has no avatar."""
        self.http.get_json.return_value = LINKEDIN_EMAILS
        provider = self.build(LinkedInProvider)
        payload = dict(LINKEDIN_PROFILE)
        del payload['profilePicture']

        profile = provider.normalize(raw_response(payload), self.http)

        self.assertIsNone(profile.avatar_url)


class TestSpotifyProvider(ProviderTestCase):

    def test_normalize(self):
        """Test Spotify mapping with the first image as avatar."""
        provider = self.build(SpotifyProvider)
        profile = provider.normalize(raw_response(SPOTIFY_PROFILE), self.http)

        self.assertEqual(profile.to_dict(), {
            'id': 'wizzler',
            'displayName': 'JM Wizzler',
            'email': 'email@example.com',
            'avatarUrl': 'https://i.scdn.co/image/ab6775700000ee85',
        })

    def test_no_images(self):
        """Test a Spotify user without profile images."""
        provider = self.build(SpotifyProvider)
        profile = provider.normalize(raw_response(dict(SPOTIFY_PROFILE, images=[])), self.http)
        self.assertIsNone(profile.avatar_url)


class TestStravaProvider(ProviderTestCase):

    def test_normalize_without_email(self):
        """Test Strava mapping, which never carries an email address."""
        provider = self.build(StravaProvider)
        profile = provider.normalize(raw_response(STRAVA_PROFILE), self.http)

        self.assertEqual(profile.to_dict(), {
            'id': '1234567890987654321',
            'displayName': 'Marianne Teutenberg',
            'avatarUrl': 'https://dgalywyr863hv.cloudfront.net/pictures/athletes/123/large.jpg',
        })
        self.http.get_json.assert_not_called()

    def test_partial_name(self):
        """Test that a missing last name does not leave a trailing space."""
        provider = self.build(StravaProvider)
        profile = provider.normalize(raw_response(dict(STRAVA_PROFILE, lastname=None)), self.http)
        self.assertEqual(profile.display_name, 'Marianne')


class TestTwitchProvider(ProviderTestCase):

    def test_normalize(self):
        """Test Twitch mapping from the first entry of the data list."""
        provider = self.build(TwitchProvider)
        profile = provider.normalize(raw_response(TWITCH_PROFILE), self.http)

        self.assertEqual(profile.to_dict(), {
            'id': '141981764',
            'displayName': 'TwitchDev',
            'email': 'not-real@email.com',
            'avatarUrl': 'https://static-cdn.jtvnw.net/jtv_user_pictures/twitchdev.png',
        })

    def test_empty_data_list(self):
        """Test that a Twitch response without users is rejected."""
        provider = self.build(TwitchProvider)
        with self.assertRaises(MalformedResponseError):
            provider.normalize(raw_response({'data': []}), self.http)


class TestWorkOSProvider(ProviderTestCase):

    def test_normalize_from_raw_attributes(self):
        """Test WorkOS mapping from SAML claims in raw_attributes."""
        provider = self.build(WorkOSProvider)
        profile = provider.normalize(raw_response(WORKOS_PROFILE), self.http)

        self.assertEqual(profile.to_dict(), {
            'id': 'prof_01DMC79VCBZ0NY2099737PSVF1',
            'displayName': 'Todd Rundgren',
            'email': 'todd@foo-corp.com',
            'avatarUrl': 'https://foo-corp.example/todd.png',
            'locale': 'en',
        })


class TestBaseProviderHelpers(ProviderTestCase):
    """Test cases for shared extraction behaviour."""

    def test_missing_profile_payload(self):
        """Test that a response without profile payload is rejected."""
        provider = self.build(GitLabProvider)
        with self.assertRaises(MalformedResponseError):
            provider.normalize({'access_token': ACCESS_TOKEN}, self.http)

    def test_empty_identifier(self):
        """Test that an empty identifier is rejected rather than used."""
        provider = self.build(SpotifyProvider)
        with self.assertRaises(MalformedResponseError):
            provider.normalize(raw_response(dict(SPOTIFY_PROFILE, id='  ')), self.http)

    def test_identifier_never_taken_from_email(self):
        """Test that a payload with only an email has no usable identifier."""
        provider = self.build(GitLabProvider)
        with self.assertRaises(MalformedResponseError):
            provider.normalize(raw_response({'email': 'john@example.com'}), self.http)

    def test_language_reduction(self):
        """Test locale tags reduced to their language code."""
        self.assertEqual(GoogleProvider._language('pt_BR'), 'pt')
        self.assertEqual(GoogleProvider._language('zh-Hant-TW'), 'zh')
        self.assertEqual(GoogleProvider._language('FR'), 'fr')
        self.assertIsNone(GoogleProvider._language(''))
        self.assertIsNone(GoogleProvider._language(None))


if __name__ == '__main__':
    unittest.main()
